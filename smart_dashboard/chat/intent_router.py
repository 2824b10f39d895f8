"""
Rule-based chat replies.

A message is tested against ``IntentRouter.rules`` in order; the first rule
whose predicate matches produces the reply and later rules are not looked at.
Only task creation and task completion write to the store.
"""
from __future__ import annotations

import logging
import random
import re
from datetime import datetime
from typing import Callable, List, NamedTuple, Optional

from sqlalchemy.orm import Session

from smart_dashboard.analytics.aggregator import AnalyticsAggregator
from smart_dashboard.database import utcnow
from smart_dashboard.models.task import STATUS_COMPLETED, Task
from smart_dashboard.models.user import DEMO_USER_ID
from smart_dashboard.task import task_service
from smart_dashboard.task.field_extractor import extract_task_fields

logger = logging.getLogger("smart_dashboard.chat")

APOLOGY = "😔 Sorry, I ran into a problem while handling that. Please try again in a moment."
LIST_LIMIT = 5
STRESS_THRESHOLD = 5

PRIORITY_ICONS = {"high": "🔴", "medium": "🟡", "low": "🟢"}


def _words(*words: str) -> re.Pattern:
    return re.compile(r"\b(?:" + "|".join(words) + r")\b", re.IGNORECASE)


CREATE_PATTERNS = [
    re.compile(r"\b(?:create|add|make|new)\s+(?:a\s+)?(?:new\s+)?task\b\s*(?:to\b|:)?\s*(.*)$", re.IGNORECASE),
    re.compile(r"\bremind me to\s+(.*)$", re.IGNORECASE),
    re.compile(r"\bi need to\s+(.*)$", re.IGNORECASE),
    re.compile(r"^(?:task|todo|add)\s*:\s*(.*)$", re.IGNORECASE),
]
LIST_RE = re.compile(
    r"\b(?:show|list)\s+(?:me\s+)?(?:all\s+)?(?:my\s+)?(?:tasks?|todos?|to-dos?)\b", re.IGNORECASE
)
COMPLETE_RE = re.compile(r"\b(?:complete|finish|done)\s+(?:with\s+)?(?:the\s+)?(?:task\s+)?(.+)$", re.IGNORECASE)
OVERDUE_RE = re.compile(r"\boverdue\b|\blate\s+tasks?\b", re.IGNORECASE)
TODAY_RE = re.compile(r"\btoday'?s?\s+tasks?\b|\btasks?\s+(?:due\s+|for\s+)?today\b", re.IGNORECASE)
STRESS_RE = _words("stress", "stressed", "stressful", "overwhelmed", "anxious", "exhausted", "burned out", "too much")
MOTIVATION_RE = _words(
    "motivation", "motivate", "motivated", "unmotivated", "lazy", "procrastinating", "procrastinate", "inspire me"
)
WEATHER_RE = _words("weather", "temperature", "rain", "raining", "forecast", "sunny")
ANALYTICS_RE = _words("analytics", "productivity", "productive", "progress", "stats", "statistics", "performance")
HELP_RE = re.compile(r"\bhelp\b|\bwhat can you do\b|\bcommands\b", re.IGNORECASE)
GREETING_RE = _words("hello", "hi", "hey", "good morning", "good afternoon", "good evening", "greetings")

WEATHER_REPLIES = [
    "🌤️ The weather looks great today! It's partly cloudy with a comfortable temperature of 22°C. "
    "Perfect for outdoor activities!",
    "☀️ I checked the weather for you - it's sunny and warm! Don't forget to wear sunscreen if you're going outside.",
    "🌧️ Looks like there might be some rain later today. You might want to bring an umbrella just in case!",
    "🌡️ The temperature is quite pleasant today at 22°C. Great weather for a walk or outdoor lunch!",
]

HELP_REPLY = (
    "🤖 Here's what I can do for you:\n\n"
    "📝 **Create tasks** - \"remind me to call mom tomorrow\", \"add task: write report urgent\"\n"
    "📋 **List tasks** - \"show my tasks\"\n"
    "✅ **Complete tasks** - \"complete write report\"\n"
    "⏰ **Overdue tasks** - \"what's overdue?\"\n"
    "📅 **Today's tasks** - \"today tasks\"\n"
    "📊 **Productivity** - \"how is my productivity?\"\n"
    "🌤️ **Weather** - \"what's the weather like?\"\n\n"
    "Tip: add \"urgent\" or \"low\" to set a priority, and \"today\", \"tomorrow\" or \"in 3 days\" for a due date."
)

FALLBACK_REPLIES = [
    "🤔 I'm not sure I got that. You have {pending} pending and {in_progress} in-progress tasks - "
    "want me to show them?",
    "💭 Noted! By the way, you've completed {completed_today} task(s) today and have {pending} still pending.",
    "✨ Thanks for sharing! With {pending} pending task(s) on your list, would you like help prioritizing?",
    "🎯 I'm here to help. You're working on {in_progress} task(s) right now - need anything for those?",
    "🚀 Ready when you are! {completed_today} done today, {pending} to go. Type \"help\" to see what I can do.",
]


class IntentRule(NamedTuple):
    name: str
    match: Callable[[str], Optional[object]]
    handle: Callable[[str, object], str]


def _format_due(due: Optional[datetime]) -> str:
    if due is None:
        return "No due date"
    return due.strftime("%Y-%m-%d %H:%M")


def _task_line(task: Task) -> str:
    icon = PRIORITY_ICONS.get(task.priority, "⚪")
    due = f" (due {task.due_date.strftime('%Y-%m-%d')})" if task.due_date else ""
    return f"{icon} {task.title}{due}"


class IntentRouter:
    """
    Maps one chat message to one reply.

    ``db`` is the store handle, ``rng`` picks among canned templates and
    ``clock`` supplies "now"; pass fixed ones in tests.
    """

    def __init__(
        self,
        db: Session,
        *,
        user_id: int = DEMO_USER_ID,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.user_id = user_id
        self.rng = rng or random.Random()
        self.clock = clock
        self.rules: List[IntentRule] = [
            IntentRule("create_task", self._match_create, self._create_task),
            IntentRule("list_tasks", LIST_RE.search, self._list_tasks),
            IntentRule("complete_task", COMPLETE_RE.search, self._complete_task),
            IntentRule("overdue_tasks", OVERDUE_RE.search, self._overdue_tasks),
            IntentRule("today_tasks", TODAY_RE.search, self._today_tasks),
            IntentRule("stress", STRESS_RE.search, self._stress),
            IntentRule("motivation", MOTIVATION_RE.search, self._motivation),
            IntentRule("weather", WEATHER_RE.search, self._weather),
            IntentRule("analytics", ANALYTICS_RE.search, self._analytics),
            IntentRule("help", HELP_RE.search, self._help),
            IntentRule("greeting", GREETING_RE.search, self._greeting),
            # always last
            IntentRule("fallback", lambda text: True, self._fallback),
        ]

    # -------------------------
    # Entry point
    # -------------------------

    def classify(self, message: str) -> tuple[IntentRule, object]:
        text = message.strip()
        for rule in self.rules[:-1]:
            match = rule.match(text)
            if match:
                return rule, match
        return self.rules[-1], None

    def reply(self, message: str) -> str:
        text = message.strip()
        rule, match = self.classify(text)
        try:
            response = rule.handle(text, match)
        except Exception:
            # the conversation goes on; the failure is only logged
            logger.exception("intent_failed", extra={"intent": rule.name, "message_length": len(text)})
            self.db.rollback()
            return APOLOGY

        logger.info("intent_matched", extra={"intent": rule.name, "message_length": len(text)})
        return response

    # -------------------------
    # Helpers
    # -------------------------

    def _counts(self) -> dict:
        now = self.clock()
        counts = task_service.status_counts(self.db, self.user_id, now)
        counts["completed_today"] = task_service.completed_on(self.db, self.user_id, now)
        return counts

    @staticmethod
    def _match_create(text: str) -> Optional[re.Match]:
        for pattern in CREATE_PATTERNS:
            match = pattern.search(text)
            if match:
                return match
        return None

    # -------------------------
    # Task creation / management
    # -------------------------

    def _create_task(self, text: str, match: re.Match) -> str:
        draft = extract_task_fields(match.group(1), self.clock())
        if draft.is_empty:
            return "🤔 I'd love to add that, but what's the task? Try something like \"remind me to call mom tomorrow\"."

        task = task_service.create_task(
            self.db,
            user_id=self.user_id,
            title=draft.title,
            description=draft.description,
            priority=draft.priority,
            due_date=draft.due_date,
        )
        return (
            "✅ Task created successfully!\n\n"
            f"📋 **Title:** {task.title}\n"
            f"📝 **Description:** {task.description or 'None'}\n"
            f"🎯 **Priority:** {task.priority}\n"
            f"📅 **Due:** {_format_due(task.due_date)}"
        )

    def _list_tasks(self, text: str, match: re.Match) -> str:
        tasks = task_service.open_tasks_by_priority(self.db, self.user_id, limit=LIST_LIMIT)
        if not tasks:
            return "🎉 You have no pending tasks! Enjoy your free time or add something new."

        lines = "\n".join(f"{i}. {_task_line(t)}" for i, t in enumerate(tasks, start=1))
        return f"📋 Here are your top {len(tasks)} pending task(s):\n\n{lines}"

    def _complete_task(self, text: str, match: re.Match) -> str:
        name = match.group(1).strip().rstrip(".!?").strip()
        task = task_service.find_open_task(self.db, self.user_id, name) if name else None
        if task is None:
            return f"🤔 I couldn't find a pending task matching \"{name}\". Try \"show my tasks\" to see what's open."

        task_service.set_status(self.db, self.user_id, task.id, STATUS_COMPLETED, now=self.clock())
        return f"🎉 Great job! I've marked \"{task.title}\" as completed."

    def _overdue_tasks(self, text: str, match: re.Match) -> str:
        now = self.clock()
        tasks = task_service.overdue_tasks(self.db, self.user_id, now)
        if not tasks:
            return "✅ Great news! You have no overdue tasks."

        lines = []
        for task in tasks:
            days = (now.date() - task.due_date.date()).days
            late = "due earlier today" if days == 0 else f"{days} day{'s' if days != 1 else ''} overdue"
            lines.append(f"⚠️ {task.title} - {late}")
        return f"⏰ You have {len(tasks)} overdue task(s):\n\n" + "\n".join(lines)

    def _today_tasks(self, text: str, match: re.Match) -> str:
        tasks = task_service.tasks_due_on(self.db, self.user_id, self.clock())
        if not tasks:
            return "📅 Nothing is due today. A great moment to get ahead on upcoming work!"

        lines = "\n".join(f"• {_task_line(t)}" for t in tasks)
        return f"📅 You have {len(tasks)} task(s) due today:\n\n{lines}"

    # -------------------------
    # Mood
    # -------------------------

    def _stress(self, text: str, match: re.Match) -> str:
        pending = self._counts()["pending"]
        if pending > STRESS_THRESHOLD:
            return (
                f"💆 It sounds like a lot right now - you have {pending} pending tasks. Let's make it manageable:\n\n"
                "1. Pick the 3 most important tasks and focus only on those today\n"
                "2. Break big tasks into 15-minute steps\n"
                "3. Take a 5-minute break every hour\n"
                "4. Move anything non-urgent to later this week\n\n"
                "Say \"show my tasks\" and we can prioritize together."
            )
        return (
            f"🌿 Take a deep breath - you only have {pending} pending task(s), which is very manageable. "
            "One step at a time, you've got this!"
        )

    def _motivation(self, text: str, match: re.Match) -> str:
        done = self._counts()["completed_today"]
        if done > 0:
            return f"💪 You've already completed {done} task(s) today - that's real momentum! Let's keep it going."
        return "🌱 Every big achievement starts with one small step. Pick the easiest task on your list and start there!"

    # -------------------------
    # Topics
    # -------------------------

    def _weather(self, text: str, match: re.Match) -> str:
        return self.rng.choice(WEATHER_REPLIES)

    def _analytics(self, text: str, match: re.Match) -> str:
        aggregator = AnalyticsAggregator(self.db, self.user_id, self.clock())
        summary = aggregator.task_summary()
        productivity = aggregator.productivity(summary)
        return (
            "📊 Here's your productivity snapshot:\n\n"
            f"• Completion rate: {productivity['completion_rate']}%\n"
            f"• Productivity score: {round(productivity['score'])}/100\n"
            f"• Completed: {summary['completed_tasks']} of {summary['total_tasks']} tasks\n"
            f"• Overdue: {summary['overdue_tasks']}\n"
            f"• Trend: {productivity['trend'].replace('_', ' ')}"
        )

    def _help(self, text: str, match: re.Match) -> str:
        return HELP_REPLY

    def _greeting(self, text: str, match: re.Match) -> str:
        hour = self.clock().hour
        if hour < 12:
            part = "Good morning"
        elif hour < 17:
            part = "Good afternoon"
        else:
            part = "Good evening"

        counts = self._counts()
        if counts["overdue"]:
            status = f"You have {counts['overdue']} overdue and {counts['pending']} pending task(s)."
        else:
            status = f"You have {counts['pending']} pending task(s) and nothing overdue."
        return f"👋 {part}! {status} How can I help you today?"

    def _fallback(self, text: str, match: object) -> str:
        counts = self._counts()
        template = self.rng.choice(FALLBACK_REPLIES)
        return template.format(
            pending=counts["pending"],
            in_progress=counts["in_progress"],
            completed_today=counts["completed_today"],
        )

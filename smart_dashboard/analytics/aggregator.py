from __future__ import annotations

import logging
from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from smart_dashboard.models.analytics_event import AnalyticsEvent
from smart_dashboard.models.chat_message import MESSAGE_AI, MESSAGE_USER, ChatMessage
from smart_dashboard.models.task import STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_PENDING, Task
from smart_dashboard.task import task_service

logger = logging.getLogger("smart_dashboard.analytics")

TREND_PERIODS = {"24h": timedelta(days=1), "7d": timedelta(days=7), "30d": timedelta(days=30)}
DEFAULT_TREND_PERIOD = "7d"
WEEKS_TRACKED = 8
HEATMAP_DAYS = 30
HEATMAP_LIMIT = 200


# -------------------------
# Metric formulas
# -------------------------

def completion_rate(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    # round half up, the way the dashboard has always displayed it
    return int(100 * completed / total + 0.5)


def productivity_score(rate: float, overdue: int) -> float:
    overdue_part = 40 if overdue == 0 else max(0, 40 - overdue * 10)
    return float(max(0, min(100, rate * 0.6 + overdue_part)))


def trend_label(rate: float) -> str:
    if rate > 75:
        return "excellent"
    if rate > 50:
        return "good"
    return "needs_improvement"


def build_insights(avg_completion_days: Optional[float], overdue: int) -> List[Dict[str, str]]:
    insights = []

    if avg_completion_days is not None:
        if avg_completion_days < 2:
            insights.append({
                "type": "positive",
                "message": "Great job! You complete tasks quickly on average.",
                "icon": "🚀",
            })
        elif avg_completion_days > 5:
            insights.append({
                "type": "suggestion",
                "message": "Consider breaking down larger tasks into smaller, manageable chunks.",
                "icon": "💡",
            })

    if overdue > 0:
        plural = "s" if overdue > 1 else ""
        insights.append({
            "type": "warning",
            "message": f"You have {overdue} overdue task{plural}. Consider prioritizing them.",
            "icon": "⚠️",
        })
    else:
        insights.append({
            "type": "positive",
            "message": "Excellent! No overdue tasks. Keep up the great work!",
            "icon": "✅",
        })
    return insights


# -------------------------
# Aggregator
# -------------------------

class AnalyticsAggregator:
    """
    Derived metrics for one owner.
    Every query is scoped to ``user_id``; ``now`` is fixed at construction.
    """

    def __init__(self, db: Session, user_id: int, now: datetime):
        self.db = db
        self.user_id = user_id
        self.now = now

    # ---- tasks ----

    def task_summary(self) -> Dict[str, int]:
        counts = task_service.status_counts(self.db, self.user_id, self.now)
        return {
            "total_tasks": counts["total"],
            "completed_tasks": counts["completed"],
            "pending_tasks": counts["pending"],
            "in_progress_tasks": counts["in_progress"],
            "overdue_tasks": counts["overdue"],
        }

    def productivity(self, summary: Optional[Dict[str, int]] = None) -> Dict[str, Any]:
        summary = summary or self.task_summary()
        rate = completion_rate(summary["completed_tasks"], summary["total_tasks"])
        return {
            "score": productivity_score(rate, summary["overdue_tasks"]),
            "completion_rate": rate,
            "trend": trend_label(rate),
        }

    def completion_metrics(self) -> List[Dict[str, Any]]:
        rows = (
            self.db.query(Task.priority, Task.created_at, Task.updated_at)
            .filter(Task.user_id == self.user_id, Task.status == STATUS_COMPLETED)
            .all()
        )
        durations: Dict[str, List[float]] = defaultdict(list)
        for priority, created_at, updated_at in rows:
            durations[priority].append((updated_at - created_at).total_seconds() / 86400)

        return [
            {
                "priority": priority,
                "avg_completion_days": round(sum(days) / len(days), 2),
                "total_completed": len(days),
            }
            for priority, days in sorted(durations.items())
        ]

    def average_completion_days(self, metrics: Optional[List[Dict[str, Any]]] = None) -> Optional[float]:
        """Mean of the per-priority averages, None without completed tasks."""
        metrics = self.completion_metrics() if metrics is None else metrics
        if not metrics:
            return None
        return sum(m["avg_completion_days"] for m in metrics) / len(metrics)

    def weekly_performance(self) -> List[Dict[str, Any]]:
        since = self.now - timedelta(weeks=WEEKS_TRACKED)
        rows = (
            self.db.query(Task.created_at, Task.status)
            .filter(Task.user_id == self.user_id, Task.created_at >= since)
            .all()
        )
        buckets: Dict[tuple, Dict[str, int]] = defaultdict(lambda: {"completed": 0, "total": 0})
        for created_at, status in rows:
            iso = created_at.isocalendar()
            bucket = buckets[(iso[0], iso[1])]
            bucket["total"] += 1
            if status == STATUS_COMPLETED:
                bucket["completed"] += 1

        # most recent weeks only, reported oldest first
        recent = sorted(buckets.items())[-WEEKS_TRACKED:]
        return [
            {"year": year, "week": week, "completed": b["completed"], "total": b["total"]}
            for (year, week), b in recent
        ]

    def performance(self) -> Dict[str, Any]:
        metrics = self.completion_metrics()
        overdue = task_service.status_counts(self.db, self.user_id, self.now)["overdue"]
        return {
            "completion_metrics": metrics,
            "weekly_performance": self.weekly_performance(),
            "insights": build_insights(self.average_completion_days(metrics), overdue),
        }

    def task_trends(self, period: str = DEFAULT_TREND_PERIOD) -> List[Dict[str, Any]]:
        window = TREND_PERIODS.get(period, TREND_PERIODS[DEFAULT_TREND_PERIOD])
        rows = (
            self.db.query(Task.updated_at, Task.status)
            .filter(Task.user_id == self.user_id, Task.updated_at >= self.now - window)
            .all()
        )
        days: Dict[str, Counter] = defaultdict(Counter)
        for updated_at, status in rows:
            days[updated_at.date().isoformat()][status] += 1

        return [
            {
                "date": day,
                "completed": counts[STATUS_COMPLETED],
                "pending": counts[STATUS_PENDING],
                "in_progress": counts[STATUS_IN_PROGRESS],
            }
            for day, counts in sorted(days.items())
        ]

    def priority_distribution(self) -> List[Dict[str, Any]]:
        rows = (
            self.db.query(
                Task.priority,
                func.count(Task.id),
                func.count(case((Task.status == STATUS_COMPLETED, 1))),
            )
            .filter(Task.user_id == self.user_id)
            .group_by(Task.priority)
            .order_by(task_service.PRIORITY_ORDER)
            .all()
        )
        return [
            {"priority": priority, "count": int(count), "completed_count": int(completed)}
            for priority, count, completed in rows
        ]

    # ---- chat ----

    def chat_summary(self) -> Dict[str, int]:
        total, user, ai = (
            self.db.query(
                func.count(ChatMessage.id),
                func.count(case((ChatMessage.type == MESSAGE_USER, 1))),
                func.count(case((ChatMessage.type == MESSAGE_AI, 1))),
            )
            .filter(ChatMessage.user_id == self.user_id)
            .one()
        )
        return {
            "total_messages": int(total or 0),
            "user_messages": int(user or 0),
            "ai_responses": int(ai or 0),
        }

    # ---- events ----

    def _events_since(self, since: datetime):
        return (
            self.db.query(AnalyticsEvent.created_at, AnalyticsEvent.event_type)
            .filter(AnalyticsEvent.user_id == self.user_id, AnalyticsEvent.created_at >= since)
            .all()
        )

    def activity(self, days: int = 7) -> List[Dict[str, Any]]:
        counts: Counter = Counter()
        for created_at, event_type in self._events_since(self.now - timedelta(days=days)):
            counts[(created_at.date().isoformat(), event_type)] += 1

        # newest date first, event types alphabetical within a day
        keys = sorted(counts, key=lambda k: k[1])
        keys.sort(key=lambda k: k[0], reverse=True)
        return [
            {"date": day, "event_type": event_type, "activity_count": counts[(day, event_type)]}
            for day, event_type in keys
        ]

    def heatmap(self) -> List[Dict[str, Any]]:
        counts: Counter = Counter()
        for created_at, _ in self._events_since(self.now - timedelta(days=HEATMAP_DAYS)):
            counts[(created_at.date().isoformat(), created_at.hour)] += 1

        keys = sorted(counts, key=lambda k: k[1])
        keys.sort(key=lambda k: k[0], reverse=True)
        return [
            {"date": day, "hour": hour, "activity_count": counts[(day, hour)]}
            for day, hour in keys[:HEATMAP_LIMIT]
        ]

    def overview(self) -> Dict[str, Any]:
        summary = self.task_summary()
        return {
            "tasks": summary,
            "chat": self.chat_summary(),
            "productivity": self.productivity(summary),
            "activity": self.activity(),
        }

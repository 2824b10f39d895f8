"""Turn a chat fragment such as ``"buy milk tomorrow urgent"`` into a task draft.

Keyword and regex heuristics only. Every matched keyword is removed from the
title, so ``"buy milk tomorrow urgent"`` becomes ``Buy milk`` with high
priority and a due date one day out.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

HIGH_PRIORITY_RE = re.compile(r"\b(urgent|important|high|critical)\b", re.IGNORECASE)
LOW_PRIORITY_RE = re.compile(r"\b(low|minor|small)\b", re.IGNORECASE)

LEADING_FILLER_RE = re.compile(
    r"^(?:that i need to|i need to|need to|have to|should|must|to)\b\s*",
    re.IGNORECASE,
)
TRAILING_PUNCT_RE = re.compile(r"[.!]+$")


@dataclass
class TaskDraft:
    title: str
    description: Optional[str] = None
    priority: str = "medium"
    due_date: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return not self.title


def _relative(days: int) -> Callable[[re.Match, datetime], datetime]:
    return lambda match, now: now + timedelta(days=days)


def _in_n_days(match: re.Match, now: datetime) -> datetime:
    return now + timedelta(days=int(match.group(1)))


def _explicit_date(match: re.Match, now: datetime) -> Optional[datetime]:
    try:
        return datetime.strptime(match.group(1), "%Y-%m-%d")
    except ValueError:
        return None


# first match wins
DUE_DATE_PATTERNS: list[tuple[re.Pattern, Callable[[re.Match, datetime], Optional[datetime]]]] = [
    (re.compile(r"\b(?:today|tonight)(?:['’]s)?\b", re.IGNORECASE), _relative(0)),
    (re.compile(r"\b(?:tomorrow|tmrw)(?:['’]s)?\b", re.IGNORECASE), _relative(1)),
    (re.compile(r"\bin\s+(\d+)\s+days?\b", re.IGNORECASE), _in_n_days),
    (re.compile(r"(?:\b(?:on|by|due)\s+)?\b(\d{4}-\d{2}-\d{2})\b", re.IGNORECASE), _explicit_date),
]


def _strip(text: str, match: re.Match) -> str:
    return text[: match.start()] + " " + text[match.end():]


def _squash(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def extract_priority(text: str) -> tuple[str, str]:
    match = HIGH_PRIORITY_RE.search(text)
    if match:
        return "high", _strip(text, match)
    match = LOW_PRIORITY_RE.search(text)
    if match:
        return "low", _strip(text, match)
    return "medium", text


def extract_due_date(text: str, now: datetime) -> tuple[Optional[datetime], str]:
    for pattern, resolve in DUE_DATE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        due = resolve(match, now)
        if due is None:
            # unparseable date stays part of the title
            return None, text
        return due, _strip(text, match)
    return None, text


def clean_title(text: str) -> str:
    title = _squash(text)
    title = LEADING_FILLER_RE.sub("", title, count=1)
    title = TRAILING_PUNCT_RE.sub("", title).strip()
    if not title:
        return ""
    return title[0].upper() + title[1:]


def extract_task_fields(fragment: str, now: datetime) -> TaskDraft:
    """Pure: the same fragment and clock always give the same draft."""
    priority, rest = extract_priority(fragment)
    due_date, rest = extract_due_date(rest, now)
    return TaskDraft(title=clean_title(rest), priority=priority, due_date=due_date)

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from smart_dashboard.chat.intent_router import IntentRouter
from smart_dashboard.models.chat_message import MESSAGE_AI, MESSAGE_USER, ChatMessage

logger = logging.getLogger("smart_dashboard.chat")

HISTORY_LIMIT = 50


def reply_delay(bounds: tuple[float, float], rng: Optional[random.Random] = None) -> float:
    """Seconds to pause before answering; simulates thinking, not real work."""
    low, high = bounds
    if high <= 0:
        return 0.0
    return (rng or random).uniform(max(0.0, low), high)


def save_message(db: Session, *, user_id: int, message: str, type: str) -> ChatMessage:
    msg = ChatMessage(user_id=user_id, message=message, type=type)
    db.add(msg)
    db.commit()
    db.refresh(msg)
    return msg


def save_user_message(db: Session, user_id: int, message: str) -> ChatMessage:
    return save_message(db, user_id=user_id, message=message, type=MESSAGE_USER)


def answer(db: Session, user_id: int, message: str, rng: Optional[random.Random] = None) -> ChatMessage:
    """Run the intent router on ``message`` and store its reply."""
    text = IntentRouter(db, user_id=user_id, rng=rng).reply(message)
    return save_message(db, user_id=user_id, message=text, type=MESSAGE_AI)


def history(db: Session, user_id: int, limit: int = HISTORY_LIMIT) -> list[ChatMessage]:
    latest = (
        db.query(ChatMessage)
        .filter(ChatMessage.user_id == user_id)
        .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        .limit(limit)
        .all()
    )
    # oldest first for display
    return list(reversed(latest))


def clear_history(db: Session, user_id: int) -> int:
    deleted = db.query(ChatMessage).filter(ChatMessage.user_id == user_id).delete()
    db.commit()
    logger.info("chat_history_cleared", extra={"deleted": deleted})
    return deleted


def stats(db: Session, user_id: int, now: datetime) -> tuple[dict, list[dict]]:
    total, user, ai, last = (
        db.query(
            func.count(ChatMessage.id),
            func.count(case((ChatMessage.type == MESSAGE_USER, 1))),
            func.count(case((ChatMessage.type == MESSAGE_AI, 1))),
            func.max(ChatMessage.created_at),
        )
        .filter(ChatMessage.user_id == user_id)
        .one()
    )
    summary = {
        "total_messages": int(total or 0),
        "user_messages": int(user or 0),
        "ai_messages": int(ai or 0),
        "last_chat_date": last.date().isoformat() if last else None,
    }

    rows = (
        db.query(ChatMessage.created_at)
        .filter(ChatMessage.user_id == user_id, ChatMessage.created_at >= now - timedelta(days=7))
        .all()
    )
    per_day: dict[str, int] = {}
    for (created_at,) in rows:
        day = created_at.date().isoformat()
        per_day[day] = per_day.get(day, 0) + 1
    recent = [{"date": day, "message_count": n} for day, n in sorted(per_day.items(), reverse=True)]
    return summary, recent

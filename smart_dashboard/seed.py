# smart_dashboard/seed.py
from __future__ import annotations

import logging
import random
from datetime import timedelta

from sqlalchemy.orm import Session

from smart_dashboard.database import utcnow
from smart_dashboard.models.analytics_event import AnalyticsEvent
from smart_dashboard.models.task import Task
from smart_dashboard.models.user import DEMO_USER_ID, User

logger = logging.getLogger("smart_dashboard.seed")

DEMO_EVENT_TYPES = ["page_view", "task_created", "task_completed", "chat_message", "login"]
DEMO_EVENT_COUNT = 50

# (title, description, status, priority, due in days)
DEMO_TASKS = [
    ("Complete project proposal",
     "Finalize the Smart Assistant Dashboard proposal with all requirements", "completed", "high", -1),
    ("Review code architecture",
     "Analyze the current codebase and suggest improvements", "in-progress", "high", 1),
    ("Design user interface mockups",
     "Create beautiful mockups for the dashboard components", "pending", "medium", 2),
    ("Set up testing framework",
     "Implement unit and integration tests for the application", "pending", "medium", 3),
    ("Deploy to production",
     "Configure CI/CD pipeline and deploy to cloud platform", "pending", "low", 7),
]


def ensure_demo_user(db: Session) -> User:
    user = db.get(User, DEMO_USER_ID)
    if user is None:
        user = User(id=DEMO_USER_ID, username="demo", email="demo@example.com", password_hash="!")
        db.add(user)
        db.commit()
        logger.info("demo_user_created", extra={"user_id": DEMO_USER_ID})
    return user


def seed_demo_data(db: Session, rng: random.Random | None = None) -> bool:
    """Insert demo tasks and events into an empty store. Returns False if tasks already exist."""
    if db.query(Task).count() > 0:
        return False

    rng = rng or random.Random()
    now = utcnow()

    for title, description, status, priority, due_in in DEMO_TASKS:
        db.add(Task(
            user_id=DEMO_USER_ID,
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=now + timedelta(days=due_in),
        ))

    for _ in range(DEMO_EVENT_COUNT):
        happened = now - timedelta(seconds=rng.random() * 7 * 24 * 3600)
        db.add(AnalyticsEvent(
            user_id=DEMO_USER_ID,
            event_type=rng.choice(DEMO_EVENT_TYPES),
            event_data={"timestamp": happened.isoformat(), "value": rng.randrange(100)},
            created_at=happened,
        ))

    db.commit()
    logger.info("demo_data_seeded", extra={"tasks": len(DEMO_TASKS), "events": DEMO_EVENT_COUNT})
    return True

"""Shared fixtures: an in-memory store, a fixed clock and an HTTP client."""

import random
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from smart_dashboard.database import Base, make_engine, make_session_factory
from smart_dashboard.main import create_app
from smart_dashboard.models.task import Task
from smart_dashboard.models.user import DEMO_USER_ID
from smart_dashboard.seed import ensure_demo_user

# a Wednesday morning
NOW = datetime(2026, 3, 11, 9, 30)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def db():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = make_session_factory(engine)()
    ensure_demo_user(session)
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def make_task(db):
    def _make(title, status="pending", priority="medium", due_date=None,
              created_at=None, updated_at=None, user_id=DEMO_USER_ID):
        task = Task(
            user_id=user_id,
            title=title,
            status=status,
            priority=priority,
            due_date=due_date,
        )
        if created_at is not None:
            task.created_at = created_at
        if updated_at is not None:
            task.updated_at = updated_at
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    return _make


@pytest.fixture
def app(tmp_path):
    return create_app(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        reply_delay=(0, 0),
        seed_demo=False,
        rng=random.Random(7),
    )


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c

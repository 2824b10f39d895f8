from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from smart_dashboard.database import utcnow
from smart_dashboard.models.task import (
    PRIORITY_MEDIUM,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    Task,
)

logger = logging.getLogger("smart_dashboard.tasks")

STATUS_ORDER = case(
    {STATUS_PENDING: 1, STATUS_IN_PROGRESS: 2, STATUS_COMPLETED: 3},
    value=Task.status,
    else_=4,
)
PRIORITY_ORDER = case(
    {"high": 1, "medium": 2, "low": 3},
    value=Task.priority,
    else_=4,
)
OPEN_STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS)


def _owned(db: Session, user_id: int):
    return db.query(Task).filter(Task.user_id == user_id)


def list_tasks(db: Session, user_id: int) -> list[Task]:
    """All tasks: pending < in-progress < completed, then high < medium < low, then due date."""
    return (
        _owned(db, user_id)
        .order_by(STATUS_ORDER, PRIORITY_ORDER, Task.due_date.asc().nulls_last(), Task.id)
        .all()
    )


def get_task(db: Session, user_id: int, task_id: int) -> Optional[Task]:
    task = db.get(Task, task_id)
    if not task or task.user_id != user_id:
        return None
    return task


def create_task(
    db: Session,
    *,
    user_id: int,
    title: str,
    description: str | None = None,
    priority: str = PRIORITY_MEDIUM,
    due_date: datetime | None = None,
) -> Task:
    task = Task(
        user_id=user_id,
        title=title,
        description=description,
        priority=priority or PRIORITY_MEDIUM,
        due_date=due_date,
        status=STATUS_PENDING,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("task_created", extra={"task_id": task.id, "priority": task.priority})
    return task


def update_task(
    db: Session,
    user_id: int,
    task_id: int,
    *,
    title: str,
    description: str | None,
    status: str,
    priority: str,
    due_date: datetime | None,
) -> Optional[Task]:
    task = get_task(db, user_id, task_id)
    if task is None:
        return None

    # full replace: every field is written, including the empty ones
    task.title = title
    task.description = description
    task.status = status
    task.priority = priority
    task.due_date = due_date

    db.commit()
    db.refresh(task)
    logger.info("task_updated", extra={"task_id": task.id, "status": task.status})
    return task


def set_status(
    db: Session, user_id: int, task_id: int, status: str, now: datetime | None = None
) -> Optional[Task]:
    task = get_task(db, user_id, task_id)
    if task is None:
        return None

    task.status = status
    # onupdate does not fire when the value is unchanged
    task.updated_at = now or utcnow()
    db.commit()
    db.refresh(task)
    logger.info("task_status_changed", extra={"task_id": task.id, "status": status})
    return task


def delete_task(db: Session, user_id: int, task_id: int) -> bool:
    task = get_task(db, user_id, task_id)
    if task is None:
        return False

    db.delete(task)
    db.commit()
    logger.info("task_deleted", extra={"task_id": task_id})
    return True


def bulk_apply(db: Session, user_id: int, action: str, ids: list[int]) -> tuple[list[int], list[int]]:
    """Apply ``action`` id by id; no transaction spans the batch."""
    updated, not_found = [], []
    for task_id in ids:
        if action == "delete":
            ok = delete_task(db, user_id, task_id)
        else:
            ok = set_status(db, user_id, task_id, STATUS_COMPLETED) is not None
        (updated if ok else not_found).append(task_id)
    return updated, not_found


# ==========================
#  QUERIES USED BY CHAT / ANALYTICS
# ==========================
def open_tasks_by_priority(db: Session, user_id: int, limit: int | None = None) -> list[Task]:
    q = (
        _owned(db, user_id)
        .filter(Task.status.in_(OPEN_STATUSES))
        .order_by(PRIORITY_ORDER, Task.due_date.asc().nulls_last(), Task.id)
    )
    if limit is not None:
        q = q.limit(limit)
    return q.all()


def find_open_task(db: Session, user_id: int, name: str) -> Optional[Task]:
    """Highest-priority non-completed task whose title contains ``name``, case-insensitively."""
    return (
        _owned(db, user_id)
        # % and _ in the name are literal characters
        .filter(Task.status != STATUS_COMPLETED, func.lower(Task.title).contains(name.lower(), autoescape=True))
        .order_by(PRIORITY_ORDER, Task.due_date.asc().nulls_last(), Task.id)
        .first()
    )


def overdue_tasks(db: Session, user_id: int, now: datetime) -> list[Task]:
    return (
        _owned(db, user_id)
        .filter(Task.due_date.isnot(None), Task.due_date < now, Task.status != STATUS_COMPLETED)
        .order_by(Task.due_date.asc(), Task.id)
        .all()
    )


def tasks_due_on(db: Session, user_id: int, day: datetime) -> list[Task]:
    start = datetime(day.year, day.month, day.day)
    return (
        _owned(db, user_id)
        .filter(
            Task.due_date >= start,
            Task.due_date < start + timedelta(days=1),
            Task.status != STATUS_COMPLETED,
        )
        .order_by(PRIORITY_ORDER, Task.due_date.asc(), Task.id)
        .all()
    )


def status_counts(db: Session, user_id: int, now: datetime) -> dict:
    row = (
        db.query(
            func.count(Task.id),
            func.count(case((Task.status == STATUS_COMPLETED, 1))),
            func.count(case((Task.status == STATUS_PENDING, 1))),
            func.count(case((Task.status == STATUS_IN_PROGRESS, 1))),
            func.count(case(((Task.due_date < now) & (Task.status != STATUS_COMPLETED), 1))),
        )
        .filter(Task.user_id == user_id)
        .one()
    )
    total, completed, pending, in_progress, overdue = (int(v or 0) for v in row)
    return {
        "total": total,
        "completed": completed,
        "pending": pending,
        "in_progress": in_progress,
        "overdue": overdue,
    }


def status_priority_stats(db: Session, user_id: int, now: datetime) -> list[dict]:
    rows = (
        db.query(
            Task.status,
            Task.priority,
            func.count(Task.id),
            func.count(case(((Task.due_date < now) & (Task.status != STATUS_COMPLETED), 1))),
        )
        .filter(Task.user_id == user_id)
        .group_by(Task.status, Task.priority)
        .order_by(STATUS_ORDER, PRIORITY_ORDER)
        .all()
    )
    return [
        {"status": status, "priority": priority, "count": int(count), "overdue": int(overdue)}
        for status, priority, count, overdue in rows
    ]


def completed_on(db: Session, user_id: int, day: datetime) -> int:
    start = datetime(day.year, day.month, day.day)
    return (
        _owned(db, user_id)
        .filter(
            Task.status == STATUS_COMPLETED,
            Task.updated_at >= start,
            Task.updated_at < start + timedelta(days=1),
        )
        .count()
    )

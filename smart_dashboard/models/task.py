# smart_dashboard/models/task.py

from __future__ import annotations

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from smart_dashboard.database import Base, utcnow

STATUS_PENDING = "pending"
STATUS_IN_PROGRESS = "in-progress"
STATUS_COMPLETED = "completed"
STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED)

PRIORITY_HIGH = "high"
PRIORITY_MEDIUM = "medium"
PRIORITY_LOW = "low"
PRIORITIES = (PRIORITY_HIGH, PRIORITY_MEDIUM, PRIORITY_LOW)


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    status = Column(String, default=STATUS_PENDING, nullable=False)   # pending / in-progress / completed
    priority = Column(String, default=PRIORITY_MEDIUM, nullable=False)  # high / medium / low

    due_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def is_overdue(self, now) -> bool:
        # derived, never stored
        return self.due_date is not None and self.due_date < now and self.status != STATUS_COMPLETED

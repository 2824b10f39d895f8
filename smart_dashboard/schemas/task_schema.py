# smart_dashboard/schemas/task_schema.py
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from smart_dashboard.schemas.common_schema import to_naive_utc

TaskStatus = Literal["pending", "in-progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]


def _require_title(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Title is required")
    return value


# --------- CREATE ----------
class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    priority: TaskPriority = "medium"
    due_date: Optional[datetime] = None

    @field_validator("title")
    def title_not_blank(cls, value):
        return _require_title(value)

    @field_validator("due_date")
    def normalise_due_date(cls, value):
        return to_naive_utc(value)


# --------- UPDATE (PUT, full replace) ----------
# description / due_date left out are cleared, not kept
class TaskUpdate(BaseModel):
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None

    @field_validator("title")
    def title_not_blank(cls, value):
        return _require_title(value)

    @field_validator("due_date")
    def normalise_due_date(cls, value):
        return to_naive_utc(value)


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskBulkAction(BaseModel):
    action: Literal["complete", "delete"]
    ids: list[int]


# --------- READ ----------
class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TaskResponse(BaseModel):
    success: bool = True
    task: TaskRead


class TaskListResponse(BaseModel):
    success: bool = True
    tasks: list[TaskRead]


class TaskBulkResponse(BaseModel):
    success: bool = True
    action: str
    updated: list[int]
    not_found: list[int]


class TaskSummary(BaseModel):
    total: int
    completed: int
    pending: int
    in_progress: int
    overdue: int


class TaskStatusPriorityStat(BaseModel):
    status: str
    priority: str
    count: int
    overdue: int


class TaskStatsResponse(BaseModel):
    success: bool = True
    stats: list[TaskStatusPriorityStat]
    summary: TaskSummary

# smart_dashboard/schemas/analytics_schema.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class AnalyticsEventCreate(BaseModel):
    event_type: Optional[str] = None
    event_data: Optional[dict[str, Any]] = None


class AnalyticsEventRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    event_type: str
    event_data: Optional[dict[str, Any]] = None
    created_at: datetime


class TaskOverview(BaseModel):
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    in_progress_tasks: int
    overdue_tasks: int


class ChatOverview(BaseModel):
    total_messages: int
    user_messages: int
    ai_responses: int


class Productivity(BaseModel):
    score: float
    completion_rate: int
    trend: str


class ActivityEntry(BaseModel):
    date: str
    event_type: str
    activity_count: int


class Overview(BaseModel):
    tasks: TaskOverview
    chat: ChatOverview
    productivity: Productivity
    activity: list[ActivityEntry]


class OverviewResponse(BaseModel):
    success: bool = True
    overview: Overview
    timestamp: datetime


class TrendEntry(BaseModel):
    date: str
    completed: int
    pending: int
    in_progress: int


class PriorityEntry(BaseModel):
    priority: str
    count: int
    completed_count: int


class TrendsResponse(BaseModel):
    success: bool = True
    trends: list[TrendEntry]
    priority_distribution: list[PriorityEntry]
    period: str
    timestamp: datetime


class HeatmapCell(BaseModel):
    date: str
    hour: int
    activity_count: int


class HeatmapResponse(BaseModel):
    success: bool = True
    heatmap: list[HeatmapCell]
    timestamp: datetime


class CompletionMetric(BaseModel):
    priority: str
    avg_completion_days: float
    total_completed: int


class WeeklyEntry(BaseModel):
    year: int
    week: int
    completed: int
    total: int


class Insight(BaseModel):
    type: str
    message: str
    icon: str


class Performance(BaseModel):
    completion_metrics: list[CompletionMetric]
    weekly_performance: list[WeeklyEntry]
    insights: list[Insight]


class PerformanceResponse(BaseModel):
    success: bool = True
    performance: Performance
    timestamp: datetime

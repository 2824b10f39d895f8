import csv
import io
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from smart_dashboard.analytics.aggregator import DEFAULT_TREND_PERIOD, TREND_PERIODS, AnalyticsAggregator
from smart_dashboard.database import get_db, utcnow
from smart_dashboard.models.analytics_event import AnalyticsEvent
from smart_dashboard.models.chat_message import ChatMessage
from smart_dashboard.models.task import Task
from smart_dashboard.models.user import DEMO_USER_ID
from smart_dashboard.schemas.analytics_schema import (
    AnalyticsEventCreate,
    AnalyticsEventRead,
    HeatmapResponse,
    OverviewResponse,
    PerformanceResponse,
    TrendsResponse,
)
from smart_dashboard.schemas.chat_schema import ChatMessageRead
from smart_dashboard.schemas.common_schema import MessageResponse
from smart_dashboard.schemas.task_schema import TaskRead

logger = logging.getLogger("smart_dashboard.analytics")

router = APIRouter(prefix="/analytics", tags=["analytics"])


def get_aggregator(db: Session = Depends(get_db)) -> AnalyticsAggregator:
    return AnalyticsAggregator(db, DEMO_USER_ID, utcnow())


@router.get("/overview", response_model=OverviewResponse)
def get_overview(aggregator: AnalyticsAggregator = Depends(get_aggregator)):
    return {"overview": aggregator.overview(), "timestamp": aggregator.now}


@router.get("/tasks/trends", response_model=TrendsResponse)
def get_task_trends(period: str = DEFAULT_TREND_PERIOD, aggregator: AnalyticsAggregator = Depends(get_aggregator)):
    if period not in TREND_PERIODS:
        period = DEFAULT_TREND_PERIOD
    return {
        "trends": aggregator.task_trends(period),
        "priority_distribution": aggregator.priority_distribution(),
        "period": period,
        "timestamp": aggregator.now,
    }


@router.get("/activity/heatmap", response_model=HeatmapResponse)
def get_activity_heatmap(aggregator: AnalyticsAggregator = Depends(get_aggregator)):
    return {"heatmap": aggregator.heatmap(), "timestamp": aggregator.now}


@router.get("/performance", response_model=PerformanceResponse)
def get_performance(aggregator: AnalyticsAggregator = Depends(get_aggregator)):
    return {"performance": aggregator.performance(), "timestamp": aggregator.now}


@router.post("/event", response_model=MessageResponse)
def log_event(data: AnalyticsEventCreate, db: Session = Depends(get_db)):
    if not data.event_type:
        raise HTTPException(status_code=400, detail="Event type is required")

    event = AnalyticsEvent(user_id=DEMO_USER_ID, event_type=data.event_type, event_data=data.event_data or {})
    db.add(event)
    db.commit()
    logger.info("event_logged", extra={"event_type": data.event_type})
    return {"message": "Event logged successfully"}


@router.get("/export")
def export_data(format: str = "json", db: Session = Depends(get_db)):
    tasks = db.query(Task).filter(Task.user_id == DEMO_USER_ID).order_by(Task.id).all()
    messages = db.query(ChatMessage).filter(ChatMessage.user_id == DEMO_USER_ID).order_by(ChatMessage.id).all()

    if format == "csv":
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["Type", "Date", "Data"])
        for task in tasks:
            writer.writerow(["Task", task.created_at.isoformat(), task.title])
        for msg in messages:
            writer.writerow(["Chat", msg.created_at.isoformat(), msg.message])
        return Response(
            content=buffer.getvalue(),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="analytics-export.csv"'},
        )

    events = db.query(AnalyticsEvent).filter(AnalyticsEvent.user_id == DEMO_USER_ID).order_by(AnalyticsEvent.id).all()
    return {
        "success": True,
        "data": {
            "tasks": [TaskRead.model_validate(t).model_dump(mode="json") for t in tasks],
            "chat_messages": [ChatMessageRead.model_validate(m).model_dump(mode="json") for m in messages],
            "analytics": [AnalyticsEventRead.model_validate(e).model_dump(mode="json") for e in events],
            "exported_at": utcnow().isoformat(),
        },
    }

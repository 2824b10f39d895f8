from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from smart_dashboard.database import get_db, utcnow
from smart_dashboard.models.user import DEMO_USER_ID
from smart_dashboard.schemas.common_schema import MessageResponse
from smart_dashboard.schemas.task_schema import (
    TaskBulkAction,
    TaskBulkResponse,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskStatsResponse,
    TaskStatusUpdate,
    TaskUpdate,
)
from smart_dashboard.task import task_service


# ==========================
#  ROUTER
# ==========================
router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
)


@router.get("", response_model=TaskListResponse)
def get_all_tasks(db: Session = Depends(get_db)):
    return {"tasks": task_service.list_tasks(db, DEMO_USER_ID)}


@router.post("", response_model=TaskResponse, status_code=201)
def create_task(data: TaskCreate, db: Session = Depends(get_db)):
    task = task_service.create_task(
        db,
        user_id=DEMO_USER_ID,
        title=data.title,
        description=data.description,
        priority=data.priority,
        due_date=data.due_date,
    )
    return {"task": task}


# declared before /{task_id} so "stats" is not parsed as an id
@router.get("/stats", response_model=TaskStatsResponse)
def get_task_stats(db: Session = Depends(get_db)):
    now = utcnow()
    return {
        "stats": task_service.status_priority_stats(db, DEMO_USER_ID, now),
        "summary": task_service.status_counts(db, DEMO_USER_ID, now),
    }


@router.post("/bulk", response_model=TaskBulkResponse)
def bulk_update(data: TaskBulkAction, db: Session = Depends(get_db)):
    updated, not_found = task_service.bulk_apply(db, DEMO_USER_ID, data.action, data.ids)
    return {"action": data.action, "updated": updated, "not_found": not_found}


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, db: Session = Depends(get_db)):
    task = task_service.get_task(db, DEMO_USER_ID, task_id)
    if not task:
        raise HTTPException(404, "Task not found")
    return {"task": task}


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(task_id: int, data: TaskUpdate, db: Session = Depends(get_db)):
    task = task_service.update_task(
        db,
        DEMO_USER_ID,
        task_id,
        title=data.title,
        description=data.description,
        status=data.status,
        priority=data.priority,
        due_date=data.due_date,
    )
    if not task:
        raise HTTPException(404, "Task not found")
    return {"task": task}


@router.patch("/{task_id}/status", response_model=TaskResponse)
def update_status(task_id: int, data: TaskStatusUpdate, db: Session = Depends(get_db)):
    task = task_service.set_status(db, DEMO_USER_ID, task_id, data.status)
    if not task:
        raise HTTPException(404, "Task not found")
    return {"task": task}


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(task_id: int, db: Session = Depends(get_db)):
    if not task_service.delete_task(db, DEMO_USER_ID, task_id):
        raise HTTPException(404, "Task not found")
    return {"message": "Task deleted successfully"}

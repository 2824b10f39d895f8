import time

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from smart_dashboard.chat import chat_service
from smart_dashboard.database import get_db, utcnow
from smart_dashboard.models.user import DEMO_USER_ID
from smart_dashboard.schemas.chat_schema import (
    ChatHistoryResponse,
    ChatMessageCreate,
    ChatStatsResponse,
    ChatTurnResponse,
)
from smart_dashboard.schemas.common_schema import MessageResponse

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/history", response_model=ChatHistoryResponse)
def get_history(db: Session = Depends(get_db)):
    return {"messages": chat_service.history(db, DEMO_USER_ID)}


@router.post("/message", response_model=ChatTurnResponse)
def send_message(data: ChatMessageCreate, request: Request, db: Session = Depends(get_db)):
    user_message = chat_service.save_user_message(db, DEMO_USER_ID, data.message)

    # sync endpoint: runs in the threadpool, so sleeping does not block the loop
    time.sleep(chat_service.reply_delay(request.app.state.reply_delay, request.app.state.rng))

    ai_message = chat_service.answer(db, DEMO_USER_ID, data.message, rng=request.app.state.rng)
    return {"userMessage": user_message, "aiResponse": ai_message}


@router.delete("/history", response_model=MessageResponse)
def clear_history(db: Session = Depends(get_db)):
    chat_service.clear_history(db, DEMO_USER_ID)
    return {"message": "Chat history cleared"}


@router.get("/stats", response_model=ChatStatsResponse)
def get_stats(db: Session = Depends(get_db)):
    stats, recent = chat_service.stats(db, DEMO_USER_ID, utcnow())
    return {"stats": stats, "recentActivity": recent}

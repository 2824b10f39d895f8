# smart_dashboard/models/chat_message.py
from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from smart_dashboard.database import Base, utcnow

MESSAGE_USER = "user"
MESSAGE_AI = "ai"


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    message = Column(String, nullable=False)
    type = Column(String, nullable=False, default=MESSAGE_USER)  # user | ai

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

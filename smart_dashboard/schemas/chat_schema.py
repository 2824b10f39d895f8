# smart_dashboard/schemas/chat_schema.py
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChatMessageCreate(BaseModel):
    message: str

    @field_validator("message")
    def message_not_blank(cls, value):
        if not value or not value.strip():
            raise ValueError("Message is required")
        return value.strip()


class ChatMessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    message: str
    type: Literal["user", "ai"]
    timestamp: datetime = Field(validation_alias="created_at")


class ChatHistoryResponse(BaseModel):
    success: bool = True
    messages: list[ChatMessageRead]


class ChatTurnResponse(BaseModel):
    success: bool = True
    userMessage: ChatMessageRead
    aiResponse: ChatMessageRead


class ChatStats(BaseModel):
    total_messages: int
    user_messages: int
    ai_messages: int
    last_chat_date: str | None = None


class ChatDailyActivity(BaseModel):
    date: str
    message_count: int


class ChatStatsResponse(BaseModel):
    success: bool = True
    stats: ChatStats
    recentActivity: list[ChatDailyActivity]

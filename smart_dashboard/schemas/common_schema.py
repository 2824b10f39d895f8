# smart_dashboard/schemas/common_schema.py
from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel


def to_naive_utc(value: datetime | None) -> datetime | None:
    """The store keeps naive UTC; aware inputs are converted, naive ones trusted."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: str | None = None

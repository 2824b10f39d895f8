# smart_dashboard/models/user_settings.py
from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from smart_dashboard.database import Base, utcnow


class UserSettings(Base):
    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True, index=True)
    # one row per user, upserted
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    theme = Column(String, default="light", nullable=False)
    notifications = Column(Boolean, default=True, nullable=False)
    timezone = Column(String, default="UTC", nullable=False)
    language = Column(String, default="en", nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

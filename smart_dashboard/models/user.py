# smart_dashboard/models/user.py
from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String
from smart_dashboard.database import Base, utcnow

# single-user deployment: every row belongs to this user
DEMO_USER_ID = 1


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

# smart_dashboard/schemas/settings_schema.py
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class SettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    theme: str = "light"
    notifications: bool = True
    timezone: str = "UTC"
    language: str = "en"


class SettingsUpdate(BaseModel):
    theme: Optional[Literal["light", "dark"]] = None
    notifications: Optional[bool] = None
    timezone: Optional[str] = None
    language: Optional[str] = None


class SettingsResponse(BaseModel):
    success: bool = True
    settings: SettingsRead

# smart_dashboard/settings/settings_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smart_dashboard.database import get_db
from smart_dashboard.models.user import DEMO_USER_ID
from smart_dashboard.models.user_settings import UserSettings
from smart_dashboard.schemas.settings_schema import SettingsRead, SettingsResponse, SettingsUpdate

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SettingsResponse)
def get_settings(db: Session = Depends(get_db)):
    row = db.query(UserSettings).filter(UserSettings.user_id == DEMO_USER_ID).first()
    # no row yet -> defaults
    return {"settings": row if row else SettingsRead()}


@router.put("", response_model=SettingsResponse)
def upsert_settings(data: SettingsUpdate, db: Session = Depends(get_db)):
    row = db.query(UserSettings).filter(UserSettings.user_id == DEMO_USER_ID).first()
    if row is None:
        row = UserSettings(user_id=DEMO_USER_ID)
        db.add(row)

    for field, value in data.model_dump(exclude_none=True).items():
        setattr(row, field, value)

    db.commit()
    db.refresh(row)
    return {"settings": row}

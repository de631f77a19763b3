from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.api.deps import get_current_operator
from app.core.config import get_settings
from app.core.palette import STATUS_COLORS, level_colors_payload
from app.db.session import get_db
from app.models.device import Device
from app.services.devices import DeviceDirectory
from app.services.push import PushService

router = APIRouter(tags=["system"])
push_service = PushService()


class PushTestRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    title: str = Field(default="Test notification", max_length=120)
    body: str = Field(default="If you see this message, push notifications are configured correctly.", max_length=500)


@router.get("/health")
def health():
    settings = get_settings()
    return {"status": "ok", "version": settings.app_version}


@router.get("/system/info")
def system_info(db: Session = Depends(get_db)):
    settings = get_settings()
    devices_count = db.scalar(select(func.count()).select_from(Device)) or 0
    return {
        "app_name": settings.app_name,
        "app_env": settings.app_env,
        "app_version": settings.app_version,
        "push_enabled": push_service.enabled,
        "push_url": settings.expo_push_url,
        "registered_devices": devices_count,
    }


@router.get("/api/status-colors")
def status_colors():
    return {"success": True, "colors": dict(STATUS_COLORS)}


@router.get("/api/alert-level-colors")
def alert_level_colors():
    return {"success": True, "colors": level_colors_payload()}


@router.post("/push/test", dependencies=[Depends(get_current_operator)])
def push_test(payload: PushTestRequest, db: Session = Depends(get_db)):
    device = DeviceDirectory(db).find(payload.code)
    if not device:
        raise HTTPException(status_code=404, detail="Device not registered")

    message = {
        "to": device.push_token,
        "sound": "default",
        "title": payload.title,
        "body": payload.body,
        "data": {"notification_type": "test"},
        "priority": "high",
        "channelId": "default",
    }
    return push_service.send_messages([message])

from datetime import datetime

from pydantic import BaseModel, Field


class AlertUser(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=64)
    teams_affected: int | None = Field(default=None, ge=0)


class AlertFields(BaseModel):
    # emptiness of the required fields is checked by the alert service (400, not 422)
    title: str = Field(default="", max_length=255)
    status: str = Field(default="", max_length=64)
    status_color: str | None = Field(default=None, max_length=64)
    alert_level: str = Field(default="", max_length=32)
    details: str | None = None


class AlertBroadcastRequest(AlertFields):
    users: list[AlertUser] = Field(default_factory=list)


class AlertBroadcastResponse(BaseModel):
    success: bool
    alert_id: str
    successful: int
    failed: int
    total: int


class AlertMutationResponse(BaseModel):
    success: bool
    message: str
    user_alerts: int
    notifications: int


class UserAlertOut(BaseModel):
    id: int
    alert_id: str
    user_code: str
    title: str
    status: str
    status_color: str
    alert_level: str
    details: str
    teams_affected: int
    sent_at: datetime
    updated_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}


class UserAlertListResponse(BaseModel):
    success: bool
    alerts: list[UserAlertOut]


class NotificationOut(BaseModel):
    id: int
    alert_id: str
    title: str
    status: str
    status_color: str
    alert_level: str
    details: str
    total_recipients: int
    sent_at: datetime
    updated_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    success: bool
    notifications: list[NotificationOut]


class AlertDetailResponse(BaseModel):
    success: bool
    notification: NotificationOut | None
    recipients: list[UserAlertOut]

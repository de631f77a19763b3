from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field


class DeviceRegisterRequest(BaseModel):
    code: str = Field(default="", max_length=64)
    push_token: str = Field(
        default="",
        max_length=1024,
        validation_alias=AliasChoices("pushToken", "pushDestination", "push_token"),
    )


class DeviceRegisterResponse(BaseModel):
    success: bool
    message: str
    registrationId: str


class DeviceOut(BaseModel):
    code: str
    push_token: str
    registration_id: str
    updated_at: datetime
    league_count: int | None


class DeviceListResponse(BaseModel):
    success: bool
    devices: list[DeviceOut]

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_current_operator
from app.db.session import get_db
from app.schemas.devices import DeviceListResponse, DeviceOut, DeviceRegisterRequest, DeviceRegisterResponse
from app.services.codes import CodeRegistry
from app.services.devices import DeviceDirectory
from app.services.push import is_valid_push_token

router = APIRouter(prefix="/api", tags=["devices"])


@router.post("/register", response_model=DeviceRegisterResponse)
def register_device(payload: DeviceRegisterRequest, db: Session = Depends(get_db)):
    if not payload.code.strip() or not payload.push_token:
        raise HTTPException(status_code=400, detail="code and pushToken are required")

    if not CodeRegistry(db).exists(payload.code):
        raise HTTPException(status_code=400, detail="Invalid code. Contact administrator.")

    if not is_valid_push_token(payload.push_token):
        raise HTTPException(status_code=400, detail="Invalid push token format")

    registration_id = DeviceDirectory(db).upsert(payload.code, payload.push_token)
    return DeviceRegisterResponse(
        success=True,
        message="Device registered successfully",
        registrationId=registration_id,
    )


@router.get("/devices", response_model=DeviceListResponse, dependencies=[Depends(get_current_operator)])
def list_devices(db: Session = Depends(get_db)):
    devices = [
        DeviceOut(
            code=device.code,
            push_token=device.push_token,
            registration_id=device.registration_id,
            updated_at=device.updated_at,
            league_count=league_count,
        )
        for device, league_count in DeviceDirectory(db).list_all()
    ]
    return DeviceListResponse(success=True, devices=devices)

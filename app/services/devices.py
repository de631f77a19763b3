import logging
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.common import utcnow
from app.models.device import Device
from app.models.valid_code import ValidCode

logger = logging.getLogger(__name__)


def normalize_code(code: str) -> str:
    return code.strip().upper()


class DeviceDirectory:
    def __init__(self, db: Session) -> None:
        self.db = db

    def upsert(self, code: str, push_token: str) -> str:
        """Store ``push_token`` as the only destination for ``code`` and return a fresh registration id."""
        normalized = normalize_code(code)
        registration_id = str(uuid4())
        device = self.db.get(Device, normalized)
        if device is None:
            device = Device(code=normalized)
        device.push_token = push_token
        device.registration_id = registration_id
        device.updated_at = utcnow()
        self.db.add(device)
        self.db.commit()
        logger.info("Device registered with code %s.", normalized)
        return registration_id

    def find(self, code: str) -> Device | None:
        return self.db.get(Device, normalize_code(code))

    def list_all(self) -> list[tuple[Device, int | None]]:
        stmt = (
            select(Device, ValidCode.league_count)
            .outerjoin(ValidCode, ValidCode.code == Device.code)
            .order_by(Device.updated_at.desc())
        )
        return [(device, league_count) for device, league_count in self.db.execute(stmt).all()]

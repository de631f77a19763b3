from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.common import utcnow


class Device(Base):
    __tablename__ = "devices"

    # one push destination per access code, overwritten on re-registration
    code: Mapped[str] = mapped_column(String(64), primary_key=True)
    push_token: Mapped[str] = mapped_column(String(1024), nullable=False)
    registration_id: Mapped[str] = mapped_column(String(36), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

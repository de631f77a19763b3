from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.common import CreatedAtMixin


class ValidCode(CreatedAtMixin, Base):
    __tablename__ = "valid_codes"

    code: Mapped[str] = mapped_column(String(64), primary_key=True)
    league_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.valid_code import ValidCode
from app.services.devices import normalize_code

logger = logging.getLogger(__name__)


def _parse_item(item: Any) -> tuple[str | None, int, str | None]:
    """Return ``(code, league_count, error)`` for one entry of an add-codes payload."""
    if isinstance(item, str):
        code, league_count = item, 1
    elif isinstance(item, dict) and item.get("code"):
        code, league_count = str(item["code"]), item.get("league_count") or 1
    else:
        return None, 1, "Invalid format"

    if not isinstance(league_count, int) or isinstance(league_count, bool) or league_count < 1:
        return None, 1, "Invalid league_count"
    if not code.strip():
        return None, 1, "Empty code"
    return normalize_code(code), league_count, None


class CodeRegistry:
    def __init__(self, db: Session) -> None:
        self.db = db

    def exists(self, code: str) -> bool:
        return self.db.get(ValidCode, normalize_code(code)) is not None

    def list_codes(self) -> list[ValidCode]:
        return list(self.db.scalars(select(ValidCode).order_by(ValidCode.created_at.desc())).all())

    def add_codes(self, items: list[Any]) -> dict[str, Any]:
        added: list[dict[str, Any]] = []
        skipped: list[str] = []
        errors: list[dict[str, Any]] = []

        for item in items:
            code, league_count, error = _parse_item(item)
            if error is not None:
                errors.append({"code": item, "reason": error})
                continue
            if self.db.get(ValidCode, code) is not None:
                skipped.append(code)
                continue
            try:
                self.db.add(ValidCode(code=code, league_count=league_count))
                self.db.commit()
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.warning("Failed to add code %s: %s", code, exc)
                errors.append({"code": code, "reason": str(exc)})
                continue
            added.append({"code": code, "league_count": league_count})

        logger.info("Processed %d code(s): %d added, %d skipped.", len(items), len(added), len(skipped))
        return {
            "added": len(added),
            "skipped": len(skipped),
            "errors": len(errors),
            "details": {"added": added, "skipped": skipped, "errors": errors},
        }

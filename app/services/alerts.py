"""Alert fan-out and the two alert stores.

Every broadcast writes one ``UserAlert`` row per resolved recipient and a single
``Notification`` row for the whole alert. The stores share ``alert_id`` but have
no foreign key between them, so updates and soft deletes go through
``AlertStore._apply_to_both``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.palette import resolve_status_color
from app.models.alert import Notification, UserAlert
from app.models.common import utcnow
from app.services.devices import DeviceDirectory, normalize_code
from app.services.push import PushMessage, PushService, build_alert_message

logger = logging.getLogger(__name__)


class AlertValidationError(Exception):
    pass


@dataclass(frozen=True)
class Recipient:
    user_code: str
    teams_affected: int | None = None


@dataclass(frozen=True)
class AlertContent:
    title: str
    status: str
    alert_level: str
    status_color: str | None = None
    details: str | None = None

    def validate(self) -> None:
        missing = [name for name in ("title", "status", "alert_level") if not getattr(self, name)]
        if missing:
            raise AlertValidationError(f"Missing required fields: {', '.join(missing)}")

    def stored_values(self) -> dict[str, str]:
        return {
            "title": self.title,
            "status": self.status,
            "status_color": resolve_status_color(self.status, self.status_color),
            "alert_level": self.alert_level,
            "details": self.details or "",
        }


@dataclass(frozen=True)
class RecipientOutcome:
    user_code: str
    success: bool
    reason: str | None = None
    message: PushMessage | None = None


@dataclass
class BroadcastResult:
    alert_id: str
    total: int
    outcomes: list[RecipientOutcome] = field(default_factory=list)

    @property
    def successful(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.successful

    @property
    def messages(self) -> list[PushMessage]:
        return [outcome.message for outcome in self.outcomes if outcome.message is not None]


class AlertFanOutEngine:
    def __init__(self, db: Session, push_service: PushService) -> None:
        self.db = db
        self.push_service = push_service
        self.directory = DeviceDirectory(db)

    def _process_recipient(self, alert_id: str, values: dict[str, str], recipient: Recipient) -> RecipientOutcome:
        user_code = normalize_code(recipient.user_code)
        teams_affected = recipient.teams_affected or 0
        try:
            device = self.directory.find(user_code)
            if device is None:
                logger.info("Alert %s: user %s not registered.", alert_id, user_code)
                return RecipientOutcome(user_code, success=False, reason="not_registered")

            push_token = device.push_token
            now = utcnow()
            self.db.add(
                UserAlert(
                    alert_id=alert_id,
                    user_code=user_code,
                    teams_affected=teams_affected,
                    sent_at=now,
                    updated_at=now,
                    **values,
                )
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("Alert %s: failed to store alert for user %s: %s", alert_id, user_code, exc)
            return RecipientOutcome(user_code, success=False, reason="store_error")

        message = build_alert_message(
            push_token,
            alert_id=alert_id,
            title=values["title"],
            status=values["status"],
            alert_level=values["alert_level"],
            details=values["details"],
            teams_affected=teams_affected,
        )
        return RecipientOutcome(user_code, success=True, message=message)

    def _dispatch(self, alert_id: str, messages: list[PushMessage]) -> None:
        if not messages:
            return
        try:
            self.push_service.send_messages(messages)
        except Exception as exc:
            logger.warning("Alert %s: push dispatch failed: %s", alert_id, exc)

    def broadcast(self, content: AlertContent, recipients: list[Recipient]) -> BroadcastResult:
        content.validate()
        if not recipients:
            raise AlertValidationError("Missing required fields: users")

        alert_id = str(uuid4())
        values = content.stored_values()
        result = BroadcastResult(alert_id=alert_id, total=len(recipients))
        for recipient in recipients:
            result.outcomes.append(self._process_recipient(alert_id, values, recipient))

        # successful counts messages handed to the gateway, not confirmed deliveries
        self._dispatch(alert_id, result.messages)

        now = utcnow()
        self.db.add(
            Notification(
                alert_id=alert_id,
                total_recipients=result.successful,
                sent_at=now,
                updated_at=now,
                **values,
            )
        )
        self.db.commit()

        logger.info(
            "Alert %s broadcast: %d successful, %d failed of %d.",
            alert_id,
            result.successful,
            result.failed,
            result.total,
        )
        return result


class AlertStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def _apply_to_both(self, alert_id: str, values: dict[str, Any]) -> dict[str, int]:
        # both stores are always attempted; each commits on its own
        touched: dict[str, int] = {}
        first_error: SQLAlchemyError | None = None
        for model in (UserAlert, Notification):
            try:
                result = self.db.execute(update(model).where(model.alert_id == alert_id).values(**values))
                self.db.commit()
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.warning("Alert %s: %s write failed: %s", alert_id, model.__tablename__, exc)
                first_error = first_error or exc
                continue
            touched[model.__tablename__] = result.rowcount
        if first_error is not None:
            raise first_error
        return touched

    def update(self, alert_id: str, content: AlertContent) -> dict[str, int]:
        content.validate()
        return self._apply_to_both(alert_id, {**content.stored_values(), "updated_at": utcnow()})

    def soft_delete(self, alert_id: str) -> dict[str, int]:
        return self._apply_to_both(alert_id, {"is_deleted": True})

    def list_for_user(self, code: str, limit: int = 50) -> list[UserAlert]:
        stmt = (
            select(UserAlert)
            .where(UserAlert.user_code == normalize_code(code), UserAlert.is_deleted.is_(False))
            .order_by(UserAlert.sent_at.desc(), UserAlert.id.desc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt).all())

    def list_history(self, limit: int = 50) -> list[Notification]:
        stmt = (
            select(Notification)
            .where(Notification.is_deleted.is_(False))
            .order_by(Notification.sent_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt).all())

    def rows_for_alert(self, alert_id: str) -> tuple[list[UserAlert], Notification | None]:
        """All rows for one alert, soft-deleted ones included."""
        user_rows = self.db.scalars(select(UserAlert).where(UserAlert.alert_id == alert_id).order_by(UserAlert.id)).all()
        history = self.db.scalar(select(Notification).where(Notification.alert_id == alert_id))
        return list(user_rows), history

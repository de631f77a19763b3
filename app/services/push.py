import logging
from collections.abc import Iterator, Sequence
from typing import Any

import httpx

from app.core.config import get_settings
from app.core.palette import alert_emoji

logger = logging.getLogger(__name__)

EXPO_CHUNK_SIZE = 100
DETAILS_PREVIEW_LENGTH = 100

PRODUCTION_TOKEN_PREFIXES = ("ExponentPushToken[", "ExpoPushToken[")
SIMULATOR_TOKEN_PREFIX = "simulator_token_"

PushMessage = dict[str, Any]
PushTicket = dict[str, Any]


class PushGatewayError(Exception):
    pass


def is_valid_push_token(token: str | None) -> bool:
    if not token:
        return False
    if token.startswith(SIMULATOR_TOKEN_PREFIX):
        return len(token) > len(SIMULATOR_TOKEN_PREFIX)
    for prefix in PRODUCTION_TOKEN_PREFIXES:
        if token.startswith(prefix) and token.endswith("]"):
            return len(token) > len(prefix) + 1
    return False


def _notification_title(title: str, alert_level: str) -> str:
    prefix = f"{alert_emoji(alert_level)} "
    if (alert_level or "").lower() == "monster":
        prefix += "MONSTER ALERT - "
    return prefix + title


def _notification_body(status: str, teams_affected: int | None, details: str | None) -> str:
    body = status
    if teams_affected and teams_affected > 0:
        body += f" [{teams_affected} teams]"
    if details:
        body += f" - {details[:DETAILS_PREVIEW_LENGTH]}"
    return body


def build_alert_message(
    token: str,
    *,
    alert_id: str,
    title: str,
    status: str,
    alert_level: str,
    details: str,
    teams_affected: int | None,
) -> PushMessage:
    return {
        "to": token,
        "sound": "default",
        "title": _notification_title(title, alert_level),
        "body": _notification_body(status, teams_affected, details),
        "data": {
            "alert_id": alert_id,
            "status": status,
            "alert_level": alert_level,
            "title": title,
            "details": details,
            "teams_affected": teams_affected,
        },
        "priority": "high",
        "channelId": "default",
    }


def chunk_messages(messages: Sequence[PushMessage], size: int = EXPO_CHUNK_SIZE) -> Iterator[list[PushMessage]]:
    for start in range(0, len(messages), size):
        yield list(messages[start : start + size])


class PushService:
    """Client for the Expo push API.

    Messages are posted in chunks of at most ``EXPO_CHUNK_SIZE``. A failed chunk
    is logged and skipped; there are no retries.
    """

    def __init__(self, transport: httpx.BaseTransport | None = None) -> None:
        self.settings = get_settings()
        self.transport = transport
        self.enabled = self.settings.push_enabled
        if not self.enabled:
            logger.info("Push gateway disabled by configuration, messages will not be dispatched.")

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
        }
        if self.settings.expo_access_token:
            headers["Authorization"] = f"Bearer {self.settings.expo_access_token}"
        return headers

    def send_chunk(self, client: httpx.Client, chunk: list[PushMessage]) -> list[PushTicket]:
        try:
            response = client.post(self.settings.expo_push_url, json=chunk, headers=self._headers())
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise PushGatewayError(f"push request failed: {exc}") from exc

        tickets = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(tickets, list):
            errors = payload.get("errors") if isinstance(payload, dict) else None
            raise PushGatewayError(f"unexpected push response: {errors or payload!r}")
        return tickets

    def _log_ticket_errors(self, chunk: list[PushMessage], tickets: list[PushTicket]) -> int:
        # messages the gateway returned no ticket for count as errors
        failed = max(len(chunk) - len(tickets), 0)
        if failed:
            logger.warning("Push gateway returned %d ticket(s) for %d message(s).", len(tickets), len(chunk))
        for message, ticket in zip(chunk, tickets):
            if ticket.get("status") == "ok":
                continue
            failed += 1
            logger.warning(
                "Push ticket error for token=%s alert_id=%s: %s %s",
                message.get("to"),
                message.get("data", {}).get("alert_id"),
                ticket.get("message"),
                ticket.get("details"),
            )
        return failed

    def send_messages(self, messages: Sequence[PushMessage]) -> dict[str, object]:
        result: dict[str, object] = {
            "enabled": self.enabled,
            "messages_total": len(messages),
            "chunks_total": 0,
            "chunks_failed": 0,
            "tickets_ok": 0,
            "tickets_error": 0,
            "errors": [],
        }
        if not messages:
            return result
        if not self.enabled:
            logger.info("Push skipped for %d message(s): gateway disabled.", len(messages))
            return result

        errors: list[str] = []
        with httpx.Client(timeout=self.settings.expo_timeout_seconds, transport=self.transport) as client:
            for index, chunk in enumerate(chunk_messages(messages)):
                result["chunks_total"] += 1
                try:
                    tickets = self.send_chunk(client, chunk)
                except PushGatewayError as exc:
                    result["chunks_failed"] += 1
                    errors.append(f"chunk:{index} {exc}")
                    logger.warning("Push chunk %d (%d message(s)) failed: %s", index, len(chunk), exc)
                    continue

                ticket_errors = self._log_ticket_errors(chunk, tickets)
                result["tickets_error"] += ticket_errors
                result["tickets_ok"] += len(chunk) - ticket_errors

        logger.info(
            "Push dispatched %d message(s) in %d chunk(s), %d chunk(s) failed.",
            len(messages),
            result["chunks_total"],
            result["chunks_failed"],
        )
        if errors:
            result["errors"] = errors[:5]
        return result

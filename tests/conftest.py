from pathlib import Path

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def app_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_file.as_posix()}")
    monkeypatch.setenv("STATIC_DIR", str(tmp_path / "public"))
    monkeypatch.setenv("AUTO_CREATE_SCHEMA", "true")
    monkeypatch.setenv("AUTO_CREATE_OPERATOR", "true")
    monkeypatch.setenv("BOOTSTRAP_OPERATOR_LOGIN", "admin")
    monkeypatch.setenv("BOOTSTRAP_OPERATOR_PASSWORD", "admin123")
    monkeypatch.setenv("PUSH_ENABLED", "false")

    from app.core.config import clear_settings_cache
    from app.db.base import Base
    from app.db.session import create_schema, get_engine, reset_engine

    clear_settings_cache()
    reset_engine()
    create_schema()
    yield

    Base.metadata.drop_all(bind=get_engine())
    reset_engine()
    clear_settings_cache()


@pytest.fixture()
def db_session(app_env):
    from app.db.session import get_session_factory

    with get_session_factory()() as db:
        yield db


@pytest.fixture()
def app_client(app_env):
    from app.main import create_app

    with TestClient(create_app()) as client:
        yield client


class RecordingPushService:
    """Stands in for the Expo client and keeps every message it was asked to send."""

    def __init__(self, fail: bool = False) -> None:
        self.enabled = True
        self.fail = fail
        self.sent: list[dict] = []

    def send_messages(self, messages):
        self.sent.extend(messages)
        if self.fail:
            raise RuntimeError("gateway unavailable")
        return {"enabled": True, "messages_total": len(messages)}


@pytest.fixture()
def recording_push(monkeypatch: pytest.MonkeyPatch):
    from app.api import alerts as alerts_api

    recorder = RecordingPushService()
    monkeypatch.setattr(alerts_api, "push_service", recorder)
    return recorder


def auth_headers(client: TestClient) -> dict[str, str]:
    response = client.post("/auth/login", json={"login": "admin", "password": "admin123"})
    assert response.status_code == 200, response.text
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


def add_codes(client: TestClient, headers: dict[str, str], *codes) -> None:
    response = client.post("/api/add-valid-codes", headers=headers, json={"codes": list(codes)})
    assert response.status_code == 200, response.text


def register(client: TestClient, code: str, token: str) -> dict:
    response = client.post("/api/register", json={"code": code, "pushToken": token})
    assert response.status_code == 200, response.text
    return response.json()

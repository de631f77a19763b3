from fastapi.testclient import TestClient

from tests.conftest import add_codes, auth_headers, register


def test_admin_endpoints_require_auth(app_client: TestClient):
    assert app_client.get("/api/devices").status_code == 401
    assert app_client.get("/api/valid-codes").status_code == 401
    assert app_client.get("/api/notifications").status_code == 401
    assert app_client.post("/api/alert", json={}).status_code == 401
    assert app_client.delete("/api/alerts/any").status_code == 401
    assert app_client.get("/api/alerts/any").status_code == 401


def test_login_rejects_wrong_password(app_client: TestClient):
    response = app_client.post("/auth/login", json={"login": "admin", "password": "nope"})
    assert response.status_code == 401


def test_add_and_list_valid_codes(app_client: TestClient):
    headers = auth_headers(app_client)
    response = app_client.post(
        "/api/add-valid-codes",
        headers=headers,
        json={"codes": [" abc123 ", {"code": "def456", "league_count": 4}, "ABC123", "", 42]},
    )
    assert response.status_code == 200, response.text
    payload = response.json()
    assert (payload["added"], payload["skipped"], payload["errors"]) == (2, 1, 2)
    assert payload["details"]["added"] == [
        {"code": "ABC123", "league_count": 1},
        {"code": "DEF456", "league_count": 4},
    ]

    listed = app_client.get("/api/valid-codes", headers=headers).json()
    assert listed["total"] == 2
    assert {item["code"] for item in listed["codes"]} == {"ABC123", "DEF456"}


def test_add_codes_requires_non_empty_list(app_client: TestClient):
    headers = auth_headers(app_client)
    response = app_client.post("/api/add-valid-codes", headers=headers, json={"codes": []})
    assert response.status_code == 400


def test_register_overwrites_existing_device(app_client: TestClient):
    headers = auth_headers(app_client)
    add_codes(app_client, headers, {"code": "ABC123", "league_count": 2})

    first = register(app_client, "ABC123", "ExponentPushToken[xyz]")
    second = register(app_client, "abc123", "ExponentPushToken[new]")
    assert first["registrationId"] and second["registrationId"]
    assert first["registrationId"] != second["registrationId"]

    devices = app_client.get("/api/devices", headers=headers).json()["devices"]
    assert len(devices) == 1
    assert devices[0]["code"] == "ABC123"
    assert devices[0]["push_token"] == "ExponentPushToken[new]"
    assert devices[0]["league_count"] == 2


def test_register_rejects_unknown_code_and_bad_token(app_client: TestClient):
    headers = auth_headers(app_client)
    add_codes(app_client, headers, "ABC123")

    unknown = app_client.post("/api/register", json={"code": "ZZZ000", "pushToken": "ExponentPushToken[xyz]"})
    assert unknown.status_code == 400
    assert unknown.json()["detail"] == "Invalid code. Contact administrator."

    bad_token = app_client.post("/api/register", json={"code": "ABC123", "pushToken": "not-a-token"})
    assert bad_token.status_code == 400
    assert bad_token.json()["detail"] == "Invalid push token format"

    missing = app_client.post("/api/register", json={"code": "ABC123"})
    assert missing.status_code == 400

    simulator = app_client.post("/api/register", json={"code": "ABC123", "pushDestination": "simulator_token_1"})
    assert simulator.status_code == 200


def test_broadcast_partial_success(app_client: TestClient, recording_push):
    headers = auth_headers(app_client)
    add_codes(app_client, headers, "ABC123")
    register(app_client, "ABC123", "ExponentPushToken[xyz]")

    response = app_client.post(
        "/api/alert",
        headers=headers,
        json={
            "title": "Player Out",
            "status": "Out",
            "alert_level": "monster",
            "details": "knee injury",
            "users": [{"user_id": "ABC123", "teams_affected": 2}, {"user_id": "NOPE999"}],
        },
    )
    assert response.status_code == 200, response.text
    payload = response.json()
    assert (payload["successful"], payload["failed"], payload["total"]) == (1, 1, 2)

    assert len(recording_push.sent) == 1
    message = recording_push.sent[0]
    assert message["to"] == "ExponentPushToken[xyz]"
    assert message["title"].startswith("🚨 MONSTER ALERT - Player Out")
    assert message["body"] == "Out [2 teams] - knee injury"

    alerts = app_client.get("/api/user/abc123/alerts").json()["alerts"]
    assert [alert["alert_id"] for alert in alerts] == [payload["alert_id"]]
    assert app_client.get("/api/user/NOPE999/alerts").json()["alerts"] == []

    history = app_client.get("/api/notifications", headers=headers).json()["notifications"]
    assert history[0]["alert_id"] == payload["alert_id"]
    assert history[0]["total_recipients"] == 1


def test_broadcast_missing_fields_is_rejected(app_client: TestClient, recording_push):
    headers = auth_headers(app_client)
    response = app_client.post(
        "/api/alert",
        headers=headers,
        json={"title": "Player Out", "status": "Out", "users": [{"user_id": "ABC123"}]},
    )
    assert response.status_code == 400
    assert "alert_level" in response.json()["detail"]

    no_users = app_client.post(
        "/api/alert",
        headers=headers,
        json={"title": "Player Out", "status": "Out", "alert_level": "high", "users": []},
    )
    assert no_users.status_code == 400
    assert recording_push.sent == []
    assert app_client.get("/api/notifications", headers=headers).json()["notifications"] == []


def test_update_and_delete_alert_flow(app_client: TestClient, recording_push):
    headers = auth_headers(app_client)
    add_codes(app_client, headers, "ABC123")
    register(app_client, "ABC123", "ExponentPushToken[xyz]")
    alert_id = app_client.post(
        "/api/alert",
        headers=headers,
        json={"title": "Player Out", "status": "Out", "alert_level": "high", "users": [{"user_id": "ABC123"}]},
    ).json()["alert_id"]

    update_response = app_client.put(
        f"/api/alerts/{alert_id}",
        headers=headers,
        json={"title": "Player Back", "status": "Playing", "alert_level": "low", "details": "cleared"},
    )
    assert update_response.status_code == 200, update_response.text
    assert update_response.json()["user_alerts"] == 1
    assert update_response.json()["notifications"] == 1

    alert = app_client.get("/api/user/ABC123/alerts").json()["alerts"][0]
    assert (alert["title"], alert["status"], alert["details"]) == ("Player Back", "Playing", "cleared")
    history = app_client.get("/api/notifications", headers=headers).json()["notifications"][0]
    assert (history["title"], history["status_color"]) == ("Player Back", "#059669FF")

    for _ in range(2):
        delete_response = app_client.delete(f"/api/alerts/{alert_id}", headers=headers)
        assert delete_response.status_code == 200
        assert delete_response.json()["success"] is True

    assert app_client.get("/api/user/ABC123/alerts").json()["alerts"] == []
    assert app_client.get("/api/notifications", headers=headers).json()["notifications"] == []


def test_update_unknown_alert_is_not_an_error(app_client: TestClient):
    headers = auth_headers(app_client)
    response = app_client.put(
        "/api/alerts/does-not-exist",
        headers=headers,
        json={"title": "T", "status": "Out", "alert_level": "low"},
    )
    assert response.status_code == 200
    assert response.json()["user_alerts"] == 0
    assert response.json()["notifications"] == 0


def test_notifications_limit(app_client: TestClient, recording_push):
    headers = auth_headers(app_client)
    add_codes(app_client, headers, "ABC123")
    register(app_client, "ABC123", "simulator_token_1")
    for index in range(3):
        app_client.post(
            "/api/alert",
            headers=headers,
            json={"title": f"alert {index}", "status": "Note", "alert_level": "low", "users": [{"user_id": "ABC123"}]},
        )

    history = app_client.get("/api/notifications", headers=headers, params={"limit": 2}).json()["notifications"]
    assert [item["title"] for item in history] == ["alert 2", "alert 1"]


def test_broadcast_accepts_functional_color_notation(app_client: TestClient, recording_push):
    headers = auth_headers(app_client)
    add_codes(app_client, headers, "ABC123")
    register(app_client, "ABC123", "ExponentPushToken[xyz]")

    response = app_client.post(
        "/api/alert",
        headers=headers,
        json={
            "title": "Player Out",
            "status": "Out",
            "status_color": "rgba(220, 38, 38, 0.9)",
            "alert_level": "high",
            "users": [{"user_id": "ABC123"}],
        },
    )
    assert response.status_code == 200, response.text

    alert = app_client.get("/api/user/ABC123/alerts").json()["alerts"][0]
    assert alert["status_color"] == "rgba(220, 38, 38, 0.9)"


def test_alert_detail_includes_deleted_rows(app_client: TestClient, recording_push):
    headers = auth_headers(app_client)
    add_codes(app_client, headers, "ABC123", "DEF456")
    register(app_client, "ABC123", "ExponentPushToken[one]")
    register(app_client, "DEF456", "simulator_token_2")
    alert_id = app_client.post(
        "/api/alert",
        headers=headers,
        json={
            "title": "Player Out",
            "status": "Out",
            "alert_level": "high",
            "users": [{"user_id": "ABC123", "teams_affected": 3}, {"user_id": "DEF456"}],
        },
    ).json()["alert_id"]
    app_client.delete(f"/api/alerts/{alert_id}", headers=headers)

    response = app_client.get(f"/api/alerts/{alert_id}", headers=headers)
    assert response.status_code == 200, response.text
    payload = response.json()
    assert payload["notification"]["total_recipients"] == 2
    assert payload["notification"]["is_deleted"] is True
    assert [(row["user_code"], row["teams_affected"]) for row in payload["recipients"]] == [("ABC123", 3), ("DEF456", 0)]
    assert all(row["is_deleted"] for row in payload["recipients"])


def test_alert_detail_unknown_alert(app_client: TestClient):
    headers = auth_headers(app_client)
    response = app_client.get("/api/alerts/does-not-exist", headers=headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Alert not found"

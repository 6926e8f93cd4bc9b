"""Tests for the HTTP command/query surface."""

import json

import pytest
from fastapi.testclient import TestClient

from backend.app import create_app
from journey import Storage


@pytest.fixture
def client(storage: Storage) -> TestClient:
    return TestClient(create_app(storage.base_path))


def register(client: TestClient, name: str = "Hana", **extra) -> dict:
    resp = client.post("/api/verifications", json={"name": name, "email": "hana@example.com", **extra})
    assert resp.status_code == 201
    token = resp.json()["token"]
    resp = client.post(f"/api/verifications/{token}/confirm")
    assert resp.status_code == 201
    return resp.json()


# ── Settings ────────────────────────────────────────────


def test_health(client: TestClient):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_settings_roundtrip(client: TestClient):
    assert client.get("/api/settings").json()["roster_seed"] == 0
    resp = client.patch("/api/settings", json={"roster_seed": 5, "default_difficulty": "advanced"})
    assert resp.status_code == 200
    assert resp.json()["roster_seed"] == 5
    assert client.get("/api/roster").json()["seed"] == 5


def test_settings_reject_unknown_difficulty(client: TestClient):
    resp = client.patch("/api/settings", json={"default_difficulty": "legendary"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


def test_roster(client: TestClient):
    body = client.get("/api/roster").json()
    assert len(body["activities"]) == 30
    assert [c["id"] for c in body["characters"]] == ["kaea", "aroha", "rangi", "moana"]


# ── Registration ────────────────────────────────────────


def test_register_persists_journey(client: TestClient):
    snap = register(client)
    user_id = snap["user"]["id"]
    assert snap["current_day"] == 1
    assert snap["activities"][0]["unlocked"] is True
    assert client.get("/api/journeys").json() == [user_id]
    assert client.get(f"/api/journeys/{user_id}").json() == snap


def test_register_uses_default_difficulty(client: TestClient):
    client.patch("/api/settings", json={"default_difficulty": "intermediate"})
    snap = register(client)
    assert snap["user"]["difficulty"] == "intermediate"


def test_register_blank_name(client: TestClient):
    resp = client.post("/api/verifications", json={"name": "", "email": "hana@example.com"})
    assert resp.status_code == 422
    body = resp.json()
    assert body["error"] == "validation_error"
    assert body["detail"] == {"field": "name"}


def test_confirm_unknown_token(client: TestClient):
    resp = client.post("/api/verifications/bogus/confirm")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


# ── Commands ────────────────────────────────────────────


def test_unknown_journey(client: TestClient):
    assert client.get("/api/journeys/nobody").status_code == 404
    assert client.post("/api/journeys/nobody/advance-day").status_code == 404


def test_select_character(client: TestClient):
    user_id = register(client)["user"]["id"]
    resp = client.post(f"/api/journeys/{user_id}/character", json={"character_id": "moana"})
    assert resp.status_code == 423
    assert resp.json()["detail"]["character_id"] == "moana"

    resp = client.post(f"/api/journeys/{user_id}/character", json={"character_id": "kaea"})
    assert resp.status_code == 200
    assert resp.json()["selected_character_id"] == "kaea"
    view = client.get(f"/api/journeys/{user_id}/view").json()
    assert view["character_selection_required"] is False


def test_complete_activity_flow(client: TestClient):
    user_id = register(client)["user"]["id"]
    resp = client.post(f"/api/journeys/{user_id}/activities/day-3/complete")
    assert resp.status_code == 423
    assert resp.json()["error"] == "locked_activity"
    assert resp.json()["detail"]["activity_id"] == "day-3"

    resp = client.post(f"/api/journeys/{user_id}/activities/day-1/complete")
    assert resp.status_code == 200
    body = resp.json()
    assert body["result"]["unlocked_activity"]["id"] == "day-2"
    assert body["view"]["completed_count"] == 1

    # persisted between requests
    snap = client.get(f"/api/journeys/{user_id}").json()
    assert snap["activities"][0]["completed"] is True
    assert snap["current_day"] == 2


def test_unknown_activity(client: TestClient):
    user_id = register(client)["user"]["id"]
    resp = client.post(f"/api/journeys/{user_id}/activities/day-99/complete")
    assert resp.status_code == 404
    assert resp.json()["detail"] == {"activity_id": "day-99"}


def test_fifth_completion_unlocks_moana(client: TestClient):
    user_id = register(client)["user"]["id"]
    for day in range(1, 5):
        client.post(f"/api/journeys/{user_id}/activities/day-{day}/complete")
    body = client.post(f"/api/journeys/{user_id}/activities/day-5/complete").json()
    assert [c["id"] for c in body["result"]["unlocked_characters"]] == ["moana"]
    resp = client.post(f"/api/journeys/{user_id}/character", json={"character_id": "moana"})
    assert resp.status_code == 200


def test_advance_day(client: TestClient):
    user_id = register(client)["user"]["id"]
    body = client.post(f"/api/journeys/{user_id}/advance-day").json()
    assert body["current_day"] == 2
    assert body["unlocked_activity"]["id"] == "day-2"


def test_achievements(client: TestClient):
    user_id = register(client)["user"]["id"]
    payload = {"id": "first", "title": "First Steps", "icon": "👣"}
    resp = client.post(f"/api/journeys/{user_id}/achievements", json=payload)
    assert resp.status_code == 201
    assert resp.json()["unlocked_at"] is not None

    resp = client.post(f"/api/journeys/{user_id}/achievements", json=payload)
    assert resp.status_code == 409
    assert resp.json()["error"] == "duplicate"


def test_delete_journey(client: TestClient):
    user_id = register(client)["user"]["id"]
    assert client.delete(f"/api/journeys/{user_id}").json() == {"ok": True}
    assert client.delete(f"/api/journeys/{user_id}").status_code == 404
    assert client.get("/api/journeys").json() == []


def test_corrupt_record_reported(client: TestClient, storage: Storage):
    user_id = register(client)["user"]["id"]
    path = storage.base_path / "journeys" / f"{user_id}.json"
    path.write_text("{}")
    resp = client.get(f"/api/journeys/{user_id}")
    assert resp.status_code == 500
    assert resp.json()["error"] == "corrupt_state"


def test_reads_do_not_rewrite_the_record(client: TestClient, storage: Storage):
    user_id = register(client)["user"]["id"]
    path = storage.base_path / "journeys" / f"{user_id}.json"
    compact = json.dumps(json.loads(path.read_text()))
    path.write_text(compact)
    client.get(f"/api/journeys/{user_id}")
    client.get(f"/api/journeys/{user_id}/view")
    assert path.read_text() == compact

    client.post(f"/api/journeys/{user_id}/activities/day-1/complete")
    assert path.read_text() != compact


def test_rejected_command_does_not_rewrite_the_record(client: TestClient, storage: Storage):
    user_id = register(client)["user"]["id"]
    path = storage.base_path / "journeys" / f"{user_id}.json"
    before = path.read_text()
    assert client.post(f"/api/journeys/{user_id}/activities/day-4/complete").status_code == 423
    assert path.read_text() == before


def test_session_locks_are_released(client: TestClient):
    sessions = client.app.state.sessions
    user_id = register(client)["user"]["id"]
    client.get(f"/api/journeys/{user_id}")
    assert user_id in sessions._locks
    client.delete(f"/api/journeys/{user_id}")
    assert user_id not in sessions._locks
    client.get("/api/journeys/nobody")
    assert "nobody" not in sessions._locks

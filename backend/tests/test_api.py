import pytest
from fastapi.testclient import TestClient

from citylines.config import settings
from citylines.main import app
from citylines.services.level_loader import load_level_from_file

API = settings.API_PREFIX


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
    assert client.get(f"{API}/health").json()["status"] == "ok"
    assert client.get("/").json()["name"] == settings.APP_NAME


def test_security_headers(client):
    response = client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_get_handcrafted_level(client):
    response = client.get(f"{API}/levels/1")
    assert response.status_code == 200
    body = response.json()
    assert body["level"] == 1
    assert body["source"] == "handcrafted"
    assert body["data"]["grid_size"] == {"rows": 3, "cols": 3}


def test_get_invalid_level(client):
    assert client.get(f"{API}/levels/0").status_code == 400


def test_generate_level(client):
    response = client.post(f"{API}/levels/generate", json={
        "grid_size": {"rows": 4, "cols": 4},
        "landmark_count": 1,
        "difficulty": "easy",
        "min_path_length": 2,
        "seed": 49380,
    })
    assert response.status_code == 200
    body = response.json()
    assert body["seed"] == 49380
    assert body["solution_paths"][0]["landmark_id"] == "diner_1"
    assert {t["road_type"] for t in body["tiles"]} == {"landmark", "local_road", "turnpike"}


def test_generation_failure_is_422_with_kind(client):
    response = client.post(f"{API}/levels/generate", json={
        "grid_size": {"rows": 3, "cols": 3},
        "landmark_count": 1,
        "seed": 1,
    })
    assert response.status_code == 422
    assert response.json()["kind"] == "placement_exhausted"


def test_generate_rejects_tiny_grid(client):
    response = client.post(f"{API}/levels/generate", json={
        "grid_size": {"rows": 2, "cols": 2},
        "landmark_count": 1,
    })
    assert response.status_code == 422


def test_validate_record(client):
    record = load_level_from_file(1).model_dump(mode="json")
    response = client.post(f"{API}/levels/validate", json=record)
    assert response.status_code == 200
    assert response.json() == {
        "landmarks_connected": [False],
        "all_tiles_reachable": False,
        "is_complete": False,
    }

    for t in record["tiles"]:
        t["rotation"] = t["solution_rotation"]
    assert client.post(f"{API}/levels/validate", json=record).json()["is_complete"] is True


def test_validate_malformed_record(client):
    record = load_level_from_file(1).model_dump(mode="json")
    record["tiles"][1]["rotation"] = 45
    assert client.post(f"{API}/levels/validate", json=record).status_code == 400

    record = load_level_from_file(1).model_dump(mode="json")
    record["tiles"][0]["row"] = 7
    assert client.post(f"{API}/levels/validate", json=record).status_code == 400


def test_session_play_through(client):
    created = client.post(f"{API}/sessions", json={"level": 1})
    assert created.status_code == 200
    session = created.json()
    session_id = session["session_id"]
    assert session["report"]["is_complete"] is False

    hint = client.get(f"{API}/sessions/{session_id}/hint").json()
    assert hint == {"row": 1, "col": 1, "solution_rotation": 0}

    rotated = client.post(f"{API}/sessions/{session_id}/rotate", json={"row": 1, "col": 1})
    assert rotated.status_code == 200
    body = rotated.json()
    assert body["tile"]["rotation"] == 180
    assert body["report"]["is_complete"] is True

    current = client.get(f"{API}/sessions/{session_id}").json()
    assert current["report"]["is_complete"] is True
    tiles = {(t["row"], t["col"]): t for t in current["data"]["tiles"]}
    assert tiles[(1, 1)]["rotation"] == 180

    assert client.get(f"{API}/sessions/{session_id}/hint").status_code == 404


def test_session_errors(client):
    assert client.get(f"{API}/sessions/missing").status_code == 404
    assert client.post(f"{API}/sessions/missing/rotate", json={"row": 0, "col": 0}).status_code == 404

    session_id = client.post(f"{API}/sessions", json={"level": 1}).json()["session_id"]
    response = client.post(f"{API}/sessions/{session_id}/rotate", json={"row": 0, "col": 0})
    assert response.status_code == 400
    assert client.post(f"{API}/sessions", json={"level": 0}).status_code == 422

import pytest
from fastapi.testclient import TestClient

from apply_progress.api.deps import get_run_registry
from apply_progress.api.main import create_app
from apply_progress.application.services.run_registry import RunRegistry


@pytest.fixture
def registry():
    return RunRegistry()


@pytest.fixture
def client(registry):
    app = create_app()
    app.dependency_overrides[get_run_registry] = lambda: registry
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def start_run(client) -> str:
    response = client.post("/api/apply/automation/apply-now")
    assert response.status_code == 200
    return response.json()["run_id"]


def publish(client, run_id, **snapshot):
    return client.post(f"/api/apply/automation/progress/{run_id}", json={"snapshot": snapshot})


def test_apply_now_returns_run_id(client):
    response = client.post("/api/apply/automation/apply-now")

    assert response.status_code == 200
    data = response.json()
    assert data["run_id"]
    assert data["message"] == "Automation started successfully"


def test_progress_not_found_before_first_snapshot(client):
    run_id = start_run(client)

    response = client.get("/api/apply/automation/progress", params={"runId": run_id})

    assert response.status_code == 404
    assert "not found" in response.json()["detail"].lower()


def test_progress_unknown_run(client):
    response = client.get("/api/apply/automation/progress", params={"runId": "nope"})
    assert response.status_code == 404


def test_progress_requires_run_id(client):
    response = client.get("/api/apply/automation/progress")
    assert response.status_code == 422


def test_publish_then_poll_returns_bare_snapshot(client):
    run_id = start_run(client)
    response = publish(
        client,
        run_id,
        status="applying",
        current_step="Applying to Staff Engineer",
        progress=70,
        details={"jobs_fetched": 30, "jobs_matched": 8, "jobs_applied": 5},
        current_job={"title": "Staff Engineer", "company": "Acme", "index": 6, "total": 8},
        logs=[{"message": "Applied to Initech"}],
    )
    assert response.status_code == 204

    response = client.get("/api/apply/automation/progress", params={"runId": run_id})

    assert response.status_code == 200
    data = response.json()
    assert "data" not in data
    assert data["status"] == "applying"
    assert data["progress"] == 70
    assert data["details"]["jobs_applied"] == 5
    assert data["details"]["jobs_failed"] == 0
    assert data["current_job"]["company"] == "Acme"
    assert data["logs"] == [{"message": "Applied to Initech"}]
    assert "time" not in data


def test_publish_unknown_run(client):
    assert publish(client, "missing", status="running").status_code == 404


def test_publish_after_completion_conflicts(client):
    run_id = start_run(client)
    assert publish(client, run_id, status="completed", progress=100).status_code == 204

    response = publish(client, run_id, status="applying")

    assert response.status_code == 409


def test_publish_invalid_snapshot(client):
    run_id = start_run(client)
    assert publish(client, run_id, status="teleporting").status_code == 422


def test_regenerate_sources(client):
    response = client.post("/api/apply/sources/regenerate")

    assert response.status_code == 200
    assert response.json() == {"message": "Sources regenerated successfully"}

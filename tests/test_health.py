"""Smoke tests for the app: health check and mounted routers."""

from fastapi.testclient import TestClient

from pbl_dashboard.main import app

client = TestClient(app)


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_v1_routers_are_mounted():
    paths = set(client.get("/openapi.json").json()["paths"])

    assert {
        "/v1/students/{student_id}/analysis",
        "/v1/pm/danger-ranking",
        "/v1/pm/interventions",
        "/v1/pm/leader-support",
        "/v1/pm/stagnant-projects",
        "/v1/pm/task-reassignments/{task_id}/reject",
        "/v1/scoring/load",
        "/v1/chat",
        "/v1/airtable/sync",
    } <= paths

"""
Tests for the HTTP API
"""

import pytest
from fastapi.testclient import TestClient
from src.api.dialog_client import RecordingDialogClient
from src.api.sheet_client import InMemorySheetClient
from src.config.constants import DIALOG_HISTORY_LIMIT
from src.main import TaskTrackerApp
from src.services.task_cache import TaskCacheService
from src.web.main import create_app


@pytest.fixture
def client(tracker_config, clock):
    tracker = TaskTrackerApp(
        sheet_client=InMemorySheetClient(),
        config=tracker_config,
        dialog=RecordingDialogClient(),
        cache=TaskCacheService(default_ttl=tracker_config.cache_duration, clock=clock),
    )
    return TestClient(create_app(tracker))


def test_health_check(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "statuses": ["Pending", "In Progress", "Completed", "Blocked"],
    }


def test_tasks_before_init(client):
    """Test that listing before initialization reports the hint"""
    response = client.get("/api/tasks")

    assert response.status_code == 500
    assert "initialize" in response.json()["message"]


def test_task_lifecycle(client):
    """Test init, create, complete, list and delete"""
    assert client.post("/api/init").json()["success"] is True

    created = client.post("/api/tasks", json={"title": "API task", "priority": "High", "tags": "api"})
    assert created.json() == {"success": True, "id": 4}

    completed = client.post("/api/tasks/4/complete")
    assert completed.json() == {"success": True, "found": True}

    listed = client.get("/api/tasks", params={"status": "Completed"}).json()
    assert [task["title"] for task in listed["tasks"]] == ["API task"]
    assert listed["tasks"][0]["priority"] == "High"

    assert client.delete("/api/tasks/4").json() == {"success": True, "found": True}
    assert client.delete("/api/tasks/4").json() == {"success": True, "found": False}
    assert client.post("/api/tasks/4/complete").json()["found"] is False


def test_create_task_validation(client):
    client.post("/api/init")

    response = client.post("/api/tasks", json={"title": "  "})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_list_unknown_status(client):
    client.post("/api/init")

    response = client.get("/api/tasks", params={"status": "Done"})

    assert response.status_code == 400
    assert "Unknown status" in response.json()["message"]


def test_batch_create(client):
    """Test batch endpoint and input validation"""
    client.post("/api/init")

    response = client.post("/api/tasks/batch", json={"tasks": [{"name": "A"}, {"name": "B"}]})
    assert response.json() == {"success": True, "added": 2, "requested": 2}

    invalid = client.post("/api/tasks/batch", json={"tasks": "nope"})
    assert invalid.status_code == 400
    assert "Invalid tasks array" in invalid.json()["message"]


def test_analytics_report_and_due(client):
    client.post("/api/init")

    analytics = client.get("/api/analytics").json()
    assert analytics["analytics"]["total"] == 3
    assert analytics["analytics"]["by_status"]["Pending"] == 3

    report = client.get("/api/report").json()
    assert "TASK ANALYTICS DASHBOARD" in report["message"]

    due = client.get("/api/due").json()
    assert due == {"success": True, "tasks": []}

    assert client.post("/api/cache/clear").json() == {"success": True}


def test_repeated_reports_keep_dialog_history_bounded(client):
    """Test that a long-running server does not retain every dialog it showed"""
    client.post("/api/init")
    dialog = client.app.state.tracker.dialog

    for _ in range(500):
        assert client.get("/api/report").status_code == 200

    assert len(dialog.dialogs) == DIALOG_HISTORY_LIMIT
    assert dialog.last[0] == "Detailed Report"


def test_action_response_body(client):
    body = client.post("/api/init").json()

    assert set(body) == {"message", "success"}
    assert body["success"] is True

# tests/test_api.py

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from backend.deps import services as services_dependency
from backend.main import create_app
from mastery.services import Services, build_services

from .conftest import TODAY
from .fakes import BrokenBackend


@pytest.fixture()
def client(services: Services) -> TestClient:
    app = create_app()
    app.dependency_overrides[services_dependency] = lambda: services
    return TestClient(app)


@pytest.fixture()
def logged_in(client: TestClient) -> TestClient:
    response = client.post("/v1/session", json={"username": "student1", "password": "s1pass"})
    assert response.status_code == 200
    return client


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"ok": True}


def test_routes_require_session(client: TestClient) -> None:
    assert client.get("/v1/tasks").status_code == 401
    assert client.get("/v1/session").status_code == 401
    assert client.delete("/v1/session").status_code == 401


def test_login_logout_flow(client: TestClient) -> None:
    bad = client.post("/v1/session", json={"username": "student1", "password": "nope"})
    assert bad.status_code == 401

    ok = client.post("/v1/session", json={"username": "mentor", "password": "mentorpass"})
    assert ok.json() == {"id": "mentor", "name": "Mentor", "role": "mentor"}
    assert client.get("/v1/session").json()["role"] == "mentor"

    assert client.delete("/v1/session").json() == {"ok": True}
    assert client.get("/v1/session").status_code == 401


def test_backend_token_enforced_when_configured(monkeypatch: pytest.MonkeyPatch, client: TestClient) -> None:
    monkeypatch.setenv("BACKEND_SESSION_SECRET", "s3cret")
    from mastery.settings import reset_settings

    reset_settings()
    payload = {"username": "student1", "password": "s1pass"}
    assert client.post("/v1/session", json=payload).status_code == 401
    response = client.post("/v1/session", json=payload, headers={"X-Backend-Token": "s3cret"})
    assert response.status_code == 200


def test_tasks_list_and_create(logged_in: TestClient) -> None:
    items = logged_in.get("/v1/tasks").json()["items"]
    assert len(items) == 15
    assert items[-1] == {"id": "task15", "name": "SCREEN TIME", "category": "productivity", "valueKind": "duration"}

    created = logged_in.post("/v1/tasks", json={"name": "MEDITATION", "category": "wellness"})
    assert created.status_code == 201
    assert created.json()["valueKind"] == "boolean"
    assert len(logged_in.get("/v1/tasks").json()["items"]) == 16

    invalid = logged_in.post("/v1/tasks", json={"name": "X", "category": "nap-time"})
    assert invalid.status_code == 422

    blank = logged_in.post("/v1/tasks", json={"name": "   ", "category": "wellness"})
    assert blank.status_code == 422
    padded = logged_in.post("/v1/tasks", json={"name": "  STRETCH  ", "category": "wellness"})
    assert padded.json()["name"] == "STRETCH"
    assert len(logged_in.get("/v1/tasks").json()["items"]) == 17


def test_entry_writes_and_daily_progress(logged_in: TestClient) -> None:
    put = logged_in.put("/v1/entries", json={"taskId": "task1", "date": "2024-01-01", "completed": True})
    assert put.status_code == 200
    toggled = logged_in.post("/v1/entries/2024-01-01/task2/toggle")
    assert toggled.json()["completed"] is True
    valued = logged_in.put("/v1/entries/2024-01-01/task15/value", json={"value": "01:45"})
    assert valued.json() == {"taskId": "task15", "date": "2024-01-01", "completed": True, "value": "01:45"}

    entries = logged_in.get("/v1/entries", params={"date": "2024-01-01"}).json()["items"]
    assert {entry["taskId"] for entry in entries} == {"task1", "task2", "task15"}

    day = logged_in.get("/v1/progress/day/2024-01-01").json()
    assert day == {"date": "2024-01-01", "completedTasks": 3, "totalTasks": 15, "screenTime": "01:45"}


def test_entry_for_unknown_task_is_404(logged_in: TestClient) -> None:
    response = logged_in.post("/v1/entries/2024-01-01/ghost/toggle")
    assert response.status_code == 404


def test_week_month_and_categories(logged_in: TestClient) -> None:
    week = logged_in.get("/v1/progress/week/2024-01-01").json()["items"]
    assert [item["date"] for item in week] == [f"2024-01-0{d}" for d in range(1, 8)]

    month = logged_in.get("/v1/progress/month/2024/2").json()["items"]
    assert len(month) == 29
    assert logged_in.get("/v1/progress/month/2024/13").status_code == 400

    categories = logged_in.get("/v1/progress/categories/2024-01-01").json()["items"]
    assert [item["name"] for item in categories] == [
        "Morning",
        "Productivity",
        "Self-development",
        "Wellness",
        "Evening",
    ]


def test_progress_summary(logged_in: TestClient) -> None:
    for task_id in [f"task{i}" for i in range(1, 14)]:
        logged_in.post(f"/v1/entries/2024-01-02/{task_id}/toggle")

    summary = logged_in.get("/v1/progress/summary", params={"start": "2024-01-01", "end": "2024-01-07"}).json()
    assert summary["streak"] == 1
    assert summary["bestDay"]["day"] == "Tuesday"
    assert summary["threshold"] == 0.8
    assert summary["averageCompletionRate"] == pytest.approx(13 / 15 / 7 * 100)

    reversed_range = logged_in.get("/v1/progress/summary", params={"start": "2024-01-07", "end": "2024-01-01"})
    assert reversed_range.status_code == 400


def test_reports_and_csv(logged_in: TestClient) -> None:
    logged_in.post(f"/v1/entries/{TODAY.isoformat()}/task10/toggle")

    report = logged_in.get("/v1/reports/category").json()
    assert report["ordering"] == "by_value"
    assert report["rows"][0]["name"] == "Wellness"

    trend = logged_in.get("/v1/reports/trend").json()
    assert trend["ordering"] == "natural"
    assert trend["rows"][-1]["date"] == TODAY.isoformat()

    csv_response = logged_in.get("/v1/reports/category/csv")
    assert csv_response.headers["content-type"].startswith("text/csv")
    assert "self-mastery-category-report.csv" in csv_response.headers["content-disposition"]
    assert csv_response.text.splitlines()[0] == "name,value,total"

    tasks_csv = logged_in.get("/v1/reports/tasks/csv")
    assert tasks_csv.text.splitlines()[0] == "id,name,category"

    assert logged_in.get("/v1/reports/unknown").status_code == 422


def test_data_export_import_and_clear(logged_in: TestClient) -> None:
    logged_in.post("/v1/entries/2024-01-01/task1/toggle")
    exported = logged_in.get("/v1/data/export")
    backup = json.loads(exported.text)
    assert len(backup["entries"]) == 1

    bad = logged_in.post("/v1/data/import", content=b"{broken")
    assert bad.status_code == 400
    assert len(logged_in.get("/v1/entries").json()["items"]) == 1

    assert logged_in.delete("/v1/data/entries").json() == {"ok": True}
    assert logged_in.get("/v1/entries").json()["items"] == []

    restored = logged_in.post("/v1/data/import", content=exported.content)
    assert restored.json() == {"tasks": 15, "entries": 1}
    assert len(logged_in.get("/v1/entries").json()["items"]) == 1


def test_storage_failure_maps_to_503() -> None:
    app = create_app()
    broken = build_services(BrokenBackend())
    app.dependency_overrides[services_dependency] = lambda: broken
    client = TestClient(app)

    response = client.post("/v1/session", json={"username": "student1", "password": "s1pass"})
    assert response.status_code == 503
    assert response.json() == {"detail": "Storage unavailable"}

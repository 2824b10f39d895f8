"""HTTP tests for /api/analytics."""

import csv
import io

import pytest


@pytest.fixture
def populated(client):
    first = client.post("/api/tasks", json={"title": "Write report", "priority": "high"}).json()["task"]
    client.post("/api/tasks", json={"title": "Late one", "due_date": "2000-01-01T00:00:00"})
    client.patch(f"/api/tasks/{first['id']}/status", json={"status": "completed"})
    client.post("/api/chat/message", json={"message": "hi"})
    return client


def test_overview(populated):
    body = populated.get("/api/analytics/overview").json()

    overview = body["overview"]
    assert overview["tasks"] == {
        "total_tasks": 2,
        "completed_tasks": 1,
        "pending_tasks": 1,
        "in_progress_tasks": 0,
        "overdue_tasks": 1,
    }
    assert overview["chat"] == {"total_messages": 2, "user_messages": 1, "ai_responses": 1}
    assert overview["productivity"]["completion_rate"] == 50
    # 50 * 0.6 + (40 - 10)
    assert overview["productivity"]["score"] == 60
    assert overview["productivity"]["trend"] == "needs_improvement"
    assert "timestamp" in body


def test_overview_on_empty_store(client):
    productivity = client.get("/api/analytics/overview").json()["overview"]["productivity"]
    assert productivity["completion_rate"] == 0
    assert 0 <= productivity["score"] <= 100


def test_trends_default_and_unknown_period(populated):
    default = populated.get("/api/analytics/tasks/trends").json()
    assert default["period"] == "7d"
    assert sum(t["completed"] + t["pending"] + t["in_progress"] for t in default["trends"]) == 2
    assert {p["priority"] for p in default["priority_distribution"]} == {"high", "medium"}

    bogus = populated.get("/api/analytics/tasks/trends", params={"period": "1y"}).json()
    assert bogus["period"] == "7d"
    assert bogus["trends"] == default["trends"]


def test_heatmap_counts_logged_events(client):
    for _ in range(3):
        assert client.post("/api/analytics/event", json={"event_type": "page_view"}).status_code == 200

    heatmap = client.get("/api/analytics/activity/heatmap").json()["heatmap"]

    assert sum(cell["activity_count"] for cell in heatmap) == 3


def test_event_requires_type(client):
    response = client.post("/api/analytics/event", json={"event_data": {"page": "home"}})
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Event type is required"}


def test_event_is_logged(client):
    response = client.post("/api/analytics/event", json={"event_type": "login", "event_data": {"via": "web"}})
    assert response.json() == {"success": True, "message": "Event logged successfully"}

    activity = client.get("/api/analytics/overview").json()["overview"]["activity"]
    assert [(a["event_type"], a["activity_count"]) for a in activity] == [("login", 1)]


def test_performance(populated):
    performance = populated.get("/api/analytics/performance").json()["performance"]

    assert [m["priority"] for m in performance["completion_metrics"]] == ["high"]
    assert performance["weekly_performance"][-1]["total"] == 2
    assert any(i["type"] == "warning" for i in performance["insights"])


def test_export_json(populated):
    data = populated.get("/api/analytics/export").json()["data"]

    assert [t["title"] for t in data["tasks"]] == ["Write report", "Late one"]
    assert [m["type"] for m in data["chat_messages"]] == ["user", "ai"]
    assert data["analytics"] == []
    assert data["exported_at"]


def test_export_csv(populated):
    response = populated.get("/api/analytics/export", params={"format": "csv"})

    assert response.headers["content-type"].startswith("text/csv")
    assert "analytics-export.csv" in response.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0] == ["Type", "Date", "Data"]
    assert [r[0] for r in rows[1:]] == ["Task", "Task", "Chat", "Chat"]
    assert rows[1][2] == "Write report"

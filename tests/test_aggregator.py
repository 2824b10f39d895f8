"""Tests for derived analytics metrics."""

from datetime import timedelta

import pytest

from smart_dashboard.analytics.aggregator import (
    AnalyticsAggregator,
    build_insights,
    completion_rate,
    productivity_score,
    trend_label,
)
from smart_dashboard.models.analytics_event import AnalyticsEvent
from smart_dashboard.models.chat_message import ChatMessage
from smart_dashboard.models.user import DEMO_USER_ID, User


def test_completion_rate_without_tasks():
    assert completion_rate(0, 0) == 0


def test_completion_rate_rounds():
    assert completion_rate(3, 4) == 75
    assert completion_rate(1, 3) == 33
    assert completion_rate(2, 3) == 67
    assert completion_rate(1, 8) == 13


@pytest.mark.parametrize("rate", [0, 1, 33, 50, 75, 99, 100])
@pytest.mark.parametrize("overdue", [0, 1, 3, 4, 10, 250])
def test_productivity_score_is_bounded(rate, overdue):
    assert 0 <= productivity_score(rate, overdue) <= 100


def test_productivity_score_formula():
    assert productivity_score(100, 0) == 100
    assert productivity_score(50, 0) == 70
    assert productivity_score(50, 2) == 50
    assert productivity_score(0, 7) == 0
    assert isinstance(productivity_score(10, 1), float)


@pytest.mark.parametrize("rate, label", [
    (100, "excellent"), (76, "excellent"), (75, "good"), (51, "good"), (50, "needs_improvement"), (0, "needs_improvement"),
])
def test_trend_label(rate, label):
    assert trend_label(rate) == label


def test_insights_fast_completion_then_no_overdue():
    insights = build_insights(1.5, 0)
    assert [i["type"] for i in insights] == ["positive", "positive"]
    assert "quickly" in insights[0]["message"]
    assert "No overdue" in insights[1]["message"]


def test_insights_slow_completion_then_overdue_warning():
    insights = build_insights(6, 2)
    assert [i["type"] for i in insights] == ["suggestion", "warning"]
    assert "2 overdue tasks" in insights[1]["message"]


def test_insights_single_overdue_is_singular():
    assert build_insights(None, 1)[0]["message"].startswith("You have 1 overdue task.")


def test_insights_middle_completion_time_has_no_time_insight():
    assert len(build_insights(3, 0)) == 1


def test_task_summary_and_productivity(db, make_task, now):
    make_task("a", status="completed")
    make_task("b", status="completed")
    make_task("c", status="in-progress", due_date=now - timedelta(hours=1))
    make_task("d", due_date=now - timedelta(days=2))
    make_task("e", status="completed", due_date=now - timedelta(days=2))

    aggregator = AnalyticsAggregator(db, DEMO_USER_ID, now)
    summary = aggregator.task_summary()

    assert summary == {
        "total_tasks": 5,
        "completed_tasks": 3,
        "pending_tasks": 1,
        "in_progress_tasks": 1,
        "overdue_tasks": 2,
    }
    productivity = aggregator.productivity(summary)
    assert productivity["completion_rate"] == 60
    assert productivity["score"] == pytest.approx(56.0)
    assert productivity["trend"] == "good"


def test_queries_are_scoped_to_owner(db, make_task, now):
    db.add(User(id=2, username="other", email="other@example.com", password_hash="!"))
    db.commit()
    make_task("mine")
    make_task("theirs", status="completed", user_id=2)

    summary = AnalyticsAggregator(db, DEMO_USER_ID, now).task_summary()
    assert summary["total_tasks"] == 1
    assert summary["completed_tasks"] == 0


def test_completion_metrics_average_of_priority_averages(db, make_task, now):
    start = now - timedelta(days=20)
    make_task("h1", status="completed", priority="high", created_at=start, updated_at=start + timedelta(days=1))
    make_task("h2", status="completed", priority="high", created_at=start, updated_at=start + timedelta(days=3))
    make_task("l1", status="completed", priority="low", created_at=start, updated_at=start + timedelta(days=8))
    make_task("open", priority="low", created_at=start)

    aggregator = AnalyticsAggregator(db, DEMO_USER_ID, now)
    metrics = {m["priority"]: m for m in aggregator.completion_metrics()}

    assert metrics["high"]["avg_completion_days"] == 2
    assert metrics["high"]["total_completed"] == 2
    assert metrics["low"]["avg_completion_days"] == 8
    # (2 + 8) / 2, not (1 + 3 + 8) / 3
    assert aggregator.average_completion_days() == 5


def test_average_completion_without_completed_tasks(db, now):
    assert AnalyticsAggregator(db, DEMO_USER_ID, now).average_completion_days() is None


def test_weekly_performance_is_chronological(db, make_task, now):
    make_task("this week", status="completed", created_at=now - timedelta(hours=2))
    make_task("this week too", created_at=now - timedelta(hours=3))
    make_task("three weeks ago", status="completed", created_at=now - timedelta(weeks=3))
    make_task("ten weeks ago", created_at=now - timedelta(weeks=10))

    weeks = AnalyticsAggregator(db, DEMO_USER_ID, now).weekly_performance()

    iso_now = now.isocalendar()
    iso_then = (now - timedelta(weeks=3)).isocalendar()
    assert weeks == [
        {"year": iso_then[0], "week": iso_then[1], "completed": 1, "total": 1},
        {"year": iso_now[0], "week": iso_now[1], "completed": 1, "total": 2},
    ]


def test_performance_insight_order(db, make_task, now):
    start = now - timedelta(days=10)
    make_task("slow", status="completed", created_at=start, updated_at=start + timedelta(days=7))
    make_task("late", due_date=now - timedelta(days=1), created_at=start)

    performance = AnalyticsAggregator(db, DEMO_USER_ID, now).performance()

    assert [i["type"] for i in performance["insights"]] == ["suggestion", "warning"]


def test_task_trends_by_day(db, make_task, now):
    make_task("a", status="completed", updated_at=now - timedelta(days=2))
    make_task("b", updated_at=now - timedelta(days=2))
    make_task("c", status="in-progress", updated_at=now - timedelta(hours=1))
    make_task("old", status="completed", updated_at=now - timedelta(days=40))

    aggregator = AnalyticsAggregator(db, DEMO_USER_ID, now)
    trends = aggregator.task_trends("7d")

    assert [t["date"] for t in trends] == [
        (now - timedelta(days=2)).date().isoformat(),
        now.date().isoformat(),
    ]
    assert trends[0]["completed"] == 1 and trends[0]["pending"] == 1
    assert trends[1]["in_progress"] == 1
    assert len(aggregator.task_trends("30d")) == 2
    assert len(aggregator.task_trends("24h")) == 1
    assert aggregator.task_trends("bogus") == trends


def test_priority_distribution(db, make_task, now):
    make_task("a", priority="high", status="completed")
    make_task("b", priority="high")
    make_task("c", priority="low")

    distribution = AnalyticsAggregator(db, DEMO_USER_ID, now).priority_distribution()

    assert distribution == [
        {"priority": "high", "count": 2, "completed_count": 1},
        {"priority": "low", "count": 1, "completed_count": 0},
    ]


def test_chat_summary(db, now):
    db.add_all([
        ChatMessage(user_id=DEMO_USER_ID, message="hi", type="user"),
        ChatMessage(user_id=DEMO_USER_ID, message="hello!", type="ai"),
        ChatMessage(user_id=DEMO_USER_ID, message="weather?", type="user"),
    ])
    db.commit()

    assert AnalyticsAggregator(db, DEMO_USER_ID, now).chat_summary() == {
        "total_messages": 3,
        "user_messages": 2,
        "ai_responses": 1,
    }


def test_activity_and_heatmap(db, now):
    yesterday = now - timedelta(days=1)
    db.add_all([
        AnalyticsEvent(user_id=DEMO_USER_ID, event_type="login", created_at=now.replace(hour=8)),
        AnalyticsEvent(user_id=DEMO_USER_ID, event_type="page_view", created_at=now.replace(hour=8, minute=5)),
        AnalyticsEvent(user_id=DEMO_USER_ID, event_type="login", created_at=yesterday),
        AnalyticsEvent(user_id=DEMO_USER_ID, event_type="login", created_at=now - timedelta(days=12)),
    ])
    db.commit()
    aggregator = AnalyticsAggregator(db, DEMO_USER_ID, now)

    activity = aggregator.activity()
    assert activity == [
        {"date": now.date().isoformat(), "event_type": "login", "activity_count": 1},
        {"date": now.date().isoformat(), "event_type": "page_view", "activity_count": 1},
        {"date": yesterday.date().isoformat(), "event_type": "login", "activity_count": 1},
    ]

    heatmap = aggregator.heatmap()
    assert heatmap[0] == {"date": now.date().isoformat(), "hour": 8, "activity_count": 2}
    assert len(heatmap) == 3

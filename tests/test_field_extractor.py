"""Tests for turning chat fragments into task drafts."""

from datetime import datetime, timedelta

import pytest

from smart_dashboard.task.field_extractor import (
    clean_title,
    extract_due_date,
    extract_priority,
    extract_task_fields,
)

NOW = datetime(2026, 3, 11, 9, 30)


def test_reminder_with_tomorrow_and_urgent():
    draft = extract_task_fields("buy milk tomorrow urgent", NOW)

    assert draft.title == "Buy milk"
    assert draft.priority == "high"
    assert draft.due_date.date() == (NOW + timedelta(days=1)).date()
    assert draft.description is None


@pytest.mark.parametrize("word", ["urgent", "Important", "HIGH", "critical"])
def test_high_priority_words(word):
    priority, rest = extract_priority(f"call the bank {word}")
    assert priority == "high"
    assert word.lower() not in rest.lower()


@pytest.mark.parametrize("word", ["low", "minor", "small"])
def test_low_priority_words(word):
    priority, rest = extract_priority(f"{word} fix for the footer")
    assert priority == "low"
    assert clean_title(rest) == "Fix for the footer"


def test_default_priority_is_medium():
    draft = extract_task_fields("water the plants", NOW)
    assert draft.priority == "medium"
    assert draft.title == "Water the plants"


def test_high_priority_checked_before_low():
    assert extract_priority("small but urgent errand")[0] == "high"


@pytest.mark.parametrize("phrase", ["today", "tonight"])
def test_today_is_now(phrase):
    due, rest = extract_due_date(f"send invoice {phrase}", NOW)
    assert due == NOW
    assert clean_title(rest) == "Send invoice"


@pytest.mark.parametrize("fragment, days", [
    ("finish today's report", 0),
    ("finish today’s report", 0),
    ("finish tomorrow's report", 1),
])
def test_possessive_day_is_consumed(fragment, days):
    draft = extract_task_fields(fragment, NOW)
    assert draft.title == "Finish report"
    assert draft.due_date == NOW + timedelta(days=days)


def test_tmrw_abbreviation():
    due, _ = extract_due_date("gym tmrw", NOW)
    assert due == NOW + timedelta(days=1)


def test_in_n_days():
    draft = extract_task_fields("renew passport in 3 days", NOW)
    assert draft.due_date == NOW + timedelta(days=3)
    assert draft.title == "Renew passport"


def test_first_due_pattern_wins():
    due, rest = extract_due_date("prepare slides today for the talk in 5 days", NOW)
    assert due == NOW
    assert "in 5 days" in rest


def test_explicit_iso_date_is_parsed():
    draft = extract_task_fields("file taxes by 2026-04-15", NOW)
    assert draft.due_date == datetime(2026, 4, 15)
    assert draft.title == "File taxes"


def test_invalid_iso_date_stays_in_title():
    draft = extract_task_fields("check 2026-13-45 entry", NOW)
    assert draft.due_date is None
    assert "2026-13-45" in draft.title


def test_no_due_date():
    assert extract_task_fields("read a book", NOW).due_date is None


@pytest.mark.parametrize("fragment, title", [
    ("to call mom", "Call mom"),
    ("that i need to book flights", "Book flights"),
    ("need to pay rent", "Pay rent"),
    ("have to walk the dog", "Walk the dog"),
    ("should stretch", "Stretch"),
    ("must reply to Anna", "Reply to Anna"),
])
def test_leading_filler_is_stripped(fragment, title):
    assert extract_task_fields(fragment, NOW).title == title


def test_filler_stripped_only_once():
    assert clean_title("to to the store") == "To the store"


def test_trailing_punctuation_is_stripped():
    assert extract_task_fields("finish the essay!!", NOW).title == "Finish the essay"
    assert extract_task_fields("clean kitchen.", NOW).title == "Clean kitchen"


def test_empty_title_after_stripping():
    draft = extract_task_fields("urgent tomorrow", NOW)
    assert draft.title == ""
    assert draft.is_empty


def test_extraction_is_pure():
    assert extract_task_fields("buy milk today", NOW) == extract_task_fields("buy milk today", NOW)

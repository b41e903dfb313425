"""
Tests for the check-in & streak engine
"""
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytz

from habitclub.core.exceptions import (
    HabitNotFoundAfterCheckInError,
    HabitNotFoundError,
    PartialCheckInError,
    StoreTimeoutError,
    StreakConflictError
)
from habitclub.services import habits
from habitclub.services.habits import streaks

PACIFIC = pytz.timezone("America/Los_Angeles")

# FakeSupabase's clock: 2024-05-15 19:00 UTC == 12:00 PDT
NOW = datetime(2024, 5, 15, 19, 0, 0, 123456, tzinfo=timezone.utc)


def _seed_habit(fake_db, streak=0, last_check_in=None, frequency="daily"):
    return fake_db.seed(
        "habits",
        user_id="user-1",
        name="Meditate",
        frequency=frequency,
        category="Mindfulness",
        current_streak=streak,
        last_check_in=last_check_in.isoformat() if last_check_in else None
    )


# ----------------------------------------------------------------------------
# Pure streak arithmetic
# ----------------------------------------------------------------------------

def test_next_streak_rules():
    yesterday = NOW - timedelta(days=1)
    assert streaks.next_streak(5, yesterday, NOW) == 6
    assert streaks.next_streak(5, NOW - timedelta(days=2), NOW) == 1
    assert streaks.next_streak(0, None, NOW) == 1
    assert streaks.next_streak(None, None, NOW) == 1
    assert streaks.next_streak(4, NOW - timedelta(hours=1), NOW) == 4


def test_next_streak_uses_local_calendar_days():
    # 23:30 PDT on the 14th and 00:30 PDT on the 15th are one hour apart but
    # on consecutive days
    last = PACIFIC.localize(datetime(2024, 5, 14, 23, 30))
    now = PACIFIC.localize(datetime(2024, 5, 15, 0, 30))
    assert streaks.next_streak(2, last, now) == 3

    # 00:10 on the 13th to 23:50 on the 14th is under 48h but still a gap
    last = PACIFIC.localize(datetime(2024, 5, 13, 0, 10))
    now = PACIFIC.localize(datetime(2024, 5, 14, 23, 50))
    assert streaks.next_streak(2, last, now) == 3
    now = PACIFIC.localize(datetime(2024, 5, 15, 0, 10))
    assert streaks.next_streak(2, last, now) == 1


def test_default_policy_ignores_frequency():
    last_week = NOW - timedelta(days=7)
    assert streaks.compute_streak(3, last_week, NOW, "weekly", policy="calendar_day") == 1
    assert streaks.compute_streak(3, NOW - timedelta(days=1), NOW, "weekly", policy="calendar_day") == 4


def test_frequency_policy_counts_weeks_for_weekly_habits():
    last_week = NOW - timedelta(days=7)
    assert streaks.compute_streak(3, last_week, NOW, "weekly", policy="frequency") == 4
    assert streaks.compute_streak(3, NOW - timedelta(days=14), NOW, "weekly", policy="frequency") == 1
    # Daily habits are unaffected by the policy
    assert streaks.compute_streak(3, last_week, NOW, "daily", policy="frequency") == 1


def test_weekly_streak_across_year_boundary():
    last = PACIFIC.localize(datetime(2024, 12, 27, 9, 0))   # ISO week 52 of 2024
    now = PACIFIC.localize(datetime(2025, 1, 2, 9, 0))      # ISO week 1 of 2025
    assert streaks.next_weekly_streak(8, last, now) == 9


def test_already_counted():
    assert streaks.already_counted(NOW - timedelta(hours=2), NOW, "daily", policy="calendar_day")
    assert not streaks.already_counted(NOW - timedelta(days=1), NOW, "daily", policy="calendar_day")
    assert not streaks.already_counted(None, NOW, "daily", policy="calendar_day")
    # Monday vs Wednesday of the same ISO week
    monday = PACIFIC.localize(datetime(2024, 5, 13, 9, 0))
    assert streaks.already_counted(monday, NOW, "weekly", policy="frequency")
    assert not streaks.already_counted(monday, NOW, "weekly", policy="calendar_day")


# ----------------------------------------------------------------------------
# Engine against the fake store
# ----------------------------------------------------------------------------

def test_first_check_in_starts_streak(fake_db):
    habit = _seed_habit(fake_db)

    result = habits.check_in(habit["id"], "user-1", "daily")

    assert result.streak_updated
    assert result.current_streak == 1
    stored = fake_db.rows("habits")[0]
    assert stored["current_streak"] == 1
    assert stored["last_check_in"] == fake_db.rows("check_ins")[0]["created_at"]


def test_check_in_after_yesterday_extends_streak(fake_db):
    habit = _seed_habit(fake_db, streak=5, last_check_in=NOW - timedelta(days=1))

    result = habits.check_in(habit["id"], "user-1", "daily")

    assert result.current_streak == 6
    assert fake_db.rows("habits")[0]["current_streak"] == 6


def test_check_in_after_gap_resets_streak(fake_db):
    habit = _seed_habit(fake_db, streak=5, last_check_in=NOW - timedelta(days=2))

    result = habits.check_in(habit["id"], "user-1", "daily")

    assert result.current_streak == 1


def test_weekly_habit_follows_daily_cadence_by_default(fake_db):
    habit = _seed_habit(fake_db, streak=5, last_check_in=NOW - timedelta(days=7), frequency="weekly")

    result = habits.check_in(habit["id"], "user-1", "weekly")

    assert result.current_streak == 1


def test_last_check_in_is_server_timestamp(fake_db):
    habit = _seed_habit(fake_db)

    result = habits.check_in(habit["id"], "user-1")

    assert result.last_check_in == NOW
    assert result.check_in.created_at == NOW


def test_same_day_repeat_keeps_streak_but_records_event(fake_db):
    habit = _seed_habit(fake_db, streak=5, last_check_in=NOW - timedelta(days=1))

    first = habits.check_in(habit["id"], "user-1", "daily")
    fake_db.advance(hours=3)
    second = habits.check_in(habit["id"], "user-1", "daily")

    assert first.current_streak == 6
    assert not second.streak_updated
    assert second.current_streak == 6
    assert second.last_check_in == first.last_check_in
    assert len(fake_db.rows("check_ins")) == 2


def test_consecutive_days_build_a_streak(fake_db):
    habit = _seed_habit(fake_db)
    for expected in (1, 2, 3, 4):
        result = habits.check_in(habit["id"], "user-1")
        assert result.current_streak == expected
        fake_db.advance(days=1)


def test_missing_habit_keeps_event_and_reports_partial_failure(fake_db):
    with pytest.raises(HabitNotFoundAfterCheckInError) as exc_info:
        habits.check_in("missing", "user-1", "daily")

    error = exc_info.value
    assert isinstance(error, HabitNotFoundError)
    assert isinstance(error, PartialCheckInError)
    assert error.check_in is not None
    assert error.check_in.habit_id == "missing"
    assert len(fake_db.rows("check_ins")) == 1


def test_failure_to_record_event_is_not_partial(fake_db):
    habit = _seed_habit(fake_db)
    fake_db.fail_next("check_ins", "insert", httpx.ConnectTimeout("connect timed out"))

    with pytest.raises(StoreTimeoutError):
        habits.check_in(habit["id"], "user-1")

    assert fake_db.rows("check_ins") == []
    assert fake_db.rows("habits")[0]["current_streak"] == 0


def test_store_failure_after_event_is_partial(fake_db):
    habit = _seed_habit(fake_db)
    fake_db.fail_next("habits", "update", httpx.ReadTimeout("read timed out"))

    with pytest.raises(PartialCheckInError) as exc_info:
        habits.check_in(habit["id"], "user-1")

    assert isinstance(exc_info.value.__cause__, StoreTimeoutError)
    assert exc_info.value.check_in.id == fake_db.rows("check_ins")[0]["id"]


def test_concurrent_update_is_retried(fake_db):
    habit = _seed_habit(fake_db, streak=5, last_check_in=NOW - timedelta(days=1))
    interfered = []

    def other_writer(query):
        # Another check-in lands between our read and our conditional write
        if query.table_name == "habits" and query.op == "update" and not interfered:
            interfered.append(True)
            row = fake_db.rows("habits")[0]
            row["current_streak"] = 6
            row["last_check_in"] = (NOW - timedelta(minutes=5)).isoformat()

    fake_db.hooks.append(other_writer)

    result = habits.check_in(habit["id"], "user-1")

    # The retry sees today's check-in and leaves the streak alone
    assert interfered
    assert not result.streak_updated
    assert result.current_streak == 6
    assert fake_db.rows("habits")[0]["current_streak"] == 6


def test_persistent_conflict_gives_up(fake_db, monkeypatch):
    habit = _seed_habit(fake_db)
    monkeypatch.setattr(habits.repository, "update_streak_if_unchanged", lambda *args: None)

    with pytest.raises(StreakConflictError) as exc_info:
        habits.check_in(habit["id"], "user-1")

    assert exc_info.value.check_in is not None
    assert fake_db.rows("habits")[0]["current_streak"] == 0


def test_habit_deleted_mid_check_in(fake_db, monkeypatch):
    habit = _seed_habit(fake_db)
    original = habits.repository.update_streak_if_unchanged

    def delete_then_update(*args):
        fake_db.tables["habits"] = []
        return original(*args)

    monkeypatch.setattr(habits.repository, "update_streak_if_unchanged", delete_then_update)

    with pytest.raises(HabitNotFoundAfterCheckInError):
        habits.check_in(habit["id"], "user-1")


def test_check_in_history_newest_first(fake_db):
    habit = _seed_habit(fake_db)
    habits.check_in(habit["id"], "user-1")
    fake_db.advance(days=1)
    habits.check_in(habit["id"], "user-1")

    history = habits.get_check_ins(habit["id"])
    assert len(history) == 2
    assert history[0].created_at > history[1].created_at

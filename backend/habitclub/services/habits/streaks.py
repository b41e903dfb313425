"""
Streak arithmetic - pure functions, no database access

A check-in continues a streak when the previous one landed on the local
calendar day before it, restarts the streak after a gap, and leaves it
alone when the habit was already checked in that day.
"""
from datetime import datetime
from typing import Optional

from habitclub.core.config import settings
from habitclub.core.constants import STREAK_POLICY_FREQUENCY
from habitclub.models.habit import Frequency
from habitclub.utils.timezone import (
    Timestamp,
    is_same_calendar_day,
    is_yesterday,
    to_local_date
)


def next_streak(current_streak: Optional[int], last_check_in: Timestamp, now: datetime) -> int:
    """
    Streak value after a check-in at `now`

    Args:
        current_streak: Stored counter (None is treated as 0)
        last_check_in: Previous check-in timestamp, or None
        now: Server timestamp of the new check-in

    Returns:
        current_streak + 1 if last_check_in was yesterday,
        current_streak unchanged if it was earlier today,
        1 otherwise
    """
    streak = current_streak or 0

    if is_yesterday(last_check_in, now):
        return streak + 1
    if is_same_calendar_day(last_check_in, now):
        return max(streak, 1)
    return 1


def next_weekly_streak(current_streak: Optional[int], last_check_in: Timestamp, now: datetime) -> int:
    """Like next_streak but counts consecutive ISO weeks instead of days"""
    streak = current_streak or 0
    last_day = to_local_date(last_check_in)
    today = to_local_date(now)
    if last_day is None or today is None:
        return 1

    last_year, last_week, _ = last_day.isocalendar()
    year, week, _ = today.isocalendar()

    if (last_year, last_week) == (year, week):
        return max(streak, 1)

    # Monday-aligned week index so year boundaries need no special casing
    weeks_apart = (today.toordinal() - today.weekday()
                   - (last_day.toordinal() - last_day.weekday())) // 7
    if weeks_apart == 1:
        return streak + 1
    return 1


def already_counted(last_check_in: Timestamp, now: datetime, frequency: Optional[str] = None,
                    policy: Optional[str] = None) -> bool:
    """
    Whether a check-in at `now` falls in a period that is already counted

    Under the default policy the period is the calendar day for every habit.
    """
    policy = policy or settings.STREAK_POLICY
    if policy == STREAK_POLICY_FREQUENCY and frequency == Frequency.WEEKLY.value:
        last_day = to_local_date(last_check_in)
        today = to_local_date(now)
        if last_day is None or today is None:
            return False
        return last_day.isocalendar()[:2] == today.isocalendar()[:2]
    return is_same_calendar_day(last_check_in, now)


def compute_streak(current_streak: Optional[int], last_check_in: Timestamp, now: datetime,
                   frequency: Optional[str] = None, policy: Optional[str] = None) -> int:
    """
    Pick the streak rule for a habit

    The default 'calendar_day' policy ignores frequency entirely. The
    'frequency' policy opts weekly habits into week-over-week counting.
    """
    policy = policy or settings.STREAK_POLICY
    if policy == STREAK_POLICY_FREQUENCY and frequency == Frequency.WEEKLY.value:
        return next_weekly_streak(current_streak, last_check_in, now)
    return next_streak(current_streak, last_check_in, now)

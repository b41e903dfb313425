"""
Timezone Utilities - Centralized timezone and calendar-day handling

Every timestamp entering date math is first normalized into one
timezone-aware datetime in the application zone. Accepted inputs are
datetimes (naive ones are read as local time), dates, and ISO-8601 strings
such as the `timestamptz` values PostgREST returns.
"""
from datetime import date, datetime, time, timedelta
from typing import Optional, Union
import re

import pytz
from pydantic import TypeAdapter, ValidationError

from habitclub.core.config import settings

# Application timezone
LOCAL_TZ = pytz.timezone(settings.APP_TIMEZONE)

Timestamp = Union[datetime, date, str, None]

_DATETIME = TypeAdapter(datetime)

# Bare numbers are not timestamps (pydantic would read them as epoch seconds)
_NUMERIC = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def get_local_now() -> datetime:
    """
    Get current datetime in the application timezone

    Returns:
        Timezone-aware datetime object
    """
    return datetime.now(LOCAL_TZ)


def get_local_today_date() -> date:
    """Get today's date in the application timezone"""
    return get_local_now().date()


def normalize_timestamp(value: Timestamp) -> Optional[datetime]:
    """
    Convert any accepted timestamp form into an aware local datetime

    Args:
        value: datetime, date, ISO string, or None

    Returns:
        Aware datetime in LOCAL_TZ, or None if the value is missing or unparseable
    """
    if value is None:
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value or _NUMERIC.fullmatch(value):
            return None
        try:
            value = _DATETIME.validate_python(value)
        except ValidationError:
            return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return LOCAL_TZ.localize(value)
        return value.astimezone(LOCAL_TZ)

    if isinstance(value, date):
        return LOCAL_TZ.localize(datetime.combine(value, time.min))

    return None


def to_local_date(value: Timestamp) -> Optional[date]:
    """Calendar date of a timestamp in the application timezone"""
    moment = normalize_timestamp(value)
    return moment.date() if moment else None


def is_same_calendar_day(value: Timestamp, reference_now: Timestamp) -> bool:
    """
    Check whether two instants fall on the same local calendar day

    Fails closed: returns False when either side is missing or invalid.
    """
    day = to_local_date(value)
    reference = to_local_date(reference_now)
    if day is None or reference is None:
        return False
    return day == reference


def is_yesterday(value: Timestamp, reference_now: Timestamp) -> bool:
    """
    Check whether a timestamp falls on the calendar day before the reference

    Uses local calendar dates, not a rolling 24 hour window.
    """
    day = to_local_date(value)
    reference = to_local_date(reference_now)
    if day is None or reference is None:
        return False
    return day == reference - timedelta(days=1)


def is_today(value: Timestamp) -> bool:
    """Check whether a timestamp falls on today's local date"""
    day = to_local_date(value)
    return day is not None and day == get_local_today_date()


def format_local_time(value: Timestamp, fmt: Optional[str] = None) -> Optional[str]:
    """
    Format a timestamp's local wall-clock time for display

    Returns:
        Formatted string, or None if the value is missing or unparseable
    """
    moment = normalize_timestamp(value)
    if moment is None:
        return None
    return moment.strftime(fmt or settings.FEED_TIME_FORMAT)

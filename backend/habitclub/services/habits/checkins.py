"""
Check-in & Streak Engine
Records check-in events and applies them to the habit's streak
"""
from typing import Optional, List
import logging

from habitclub.core.constants import MAX_STREAK_UPDATE_ATTEMPTS, DEFAULT_CHECK_IN_HISTORY_LIMIT
from habitclub.core.exceptions import (
    DatabaseError,
    HabitNotFoundAfterCheckInError,
    PartialCheckInError,
    StreakConflictError,
    UpstreamError
)
from habitclub.models.habit import CheckIn, CheckInResult, Habit
from habitclub.utils.timezone import get_local_now
from . import repository
from .streaks import already_counted, compute_streak

logger = logging.getLogger(__name__)


def check_in(habit_id: str, user_id: str, frequency: Optional[str] = None) -> CheckInResult:
    """
    Record a check-in and update the habit's streak

    The event is written first and its server-assigned timestamp is used as
    "now" both for the streak math and for the habit's new last_check_in.
    The streak write is conditional on the values read, so two concurrent
    check-ins cannot both build on the same old streak.

    Args:
        habit_id: The habit being checked in
        user_id: The acting user
        frequency: Habit frequency hint; the stored frequency is used if omitted

    Returns:
        CheckInResult with the recorded event and resulting streak

    Raises:
        DatabaseError / StoreTimeoutError: If the event itself could not be written
        HabitNotFoundAfterCheckInError: Event recorded, habit does not exist
        StreakConflictError: Event recorded, streak kept changing underneath us
        PartialCheckInError: Event recorded, streak update failed in the store
    """
    row = repository.create_check_in(habit_id, user_id)
    if not row:
        raise DatabaseError(f"Check-in for habit {habit_id} was not returned by the store")

    event = CheckIn(**row)
    logger.info(f"[CHECK-IN] Recorded check-in {event.id} for habit_id={habit_id} user_id={user_id}")

    try:
        return _apply_to_streak(event, row.get("created_at"), frequency)
    except PartialCheckInError:
        raise
    except UpstreamError as e:
        logger.error(f"[CHECK-IN] Streak update failed after recording {event.id}: {e}")
        raise PartialCheckInError(
            f"Check-in recorded but streak was not updated: {e}",
            check_in=event
        ) from e


def _apply_to_streak(event: CheckIn, server_timestamp: Optional[str],
                     frequency: Optional[str]) -> CheckInResult:
    now = event.created_at or get_local_now()
    new_last_check_in = server_timestamp or now.isoformat()

    for attempt in range(1, MAX_STREAK_UPDATE_ATTEMPTS + 1):
        row = repository.get_habit_by_id(event.habit_id)
        if row is None:
            logger.warning(f"[CHECK-IN] Habit {event.habit_id} missing; check-in {event.id} left without streak update")
            raise HabitNotFoundAfterCheckInError(
                f"Habit {event.habit_id} not found for streak update",
                check_in=event
            )

        habit = Habit(**row)
        habit_frequency = frequency or habit.frequency.value

        if already_counted(habit.last_check_in, now, habit_frequency):
            logger.info(f"[CHECK-IN] Habit {habit.id} already checked in this period; streak stays {habit.current_streak}")
            return CheckInResult(
                check_in=event,
                habit_id=habit.id,
                current_streak=habit.current_streak,
                last_check_in=habit.last_check_in,
                streak_updated=False
            )

        new_streak = compute_streak(habit.current_streak, habit.last_check_in, now, habit_frequency)

        updated = repository.update_streak_if_unchanged(
            habit.id,
            row.get("current_streak"),
            row.get("last_check_in"),
            new_streak,
            new_last_check_in
        )
        if updated is not None:
            logger.info(f"[CHECK-IN] Habit {habit.id} streak {habit.current_streak} -> {new_streak}")
            saved = Habit(**updated)
            return CheckInResult(
                check_in=event,
                habit_id=saved.id,
                current_streak=saved.current_streak,
                last_check_in=saved.last_check_in,
                streak_updated=True
            )

        logger.info(f"[CHECK-IN] Streak for habit {habit.id} changed concurrently (attempt {attempt}), retrying")

    raise StreakConflictError(
        f"Streak for habit {event.habit_id} kept changing; gave up after {MAX_STREAK_UPDATE_ATTEMPTS} attempts",
        check_in=event
    )


def get_check_ins(habit_id: str, limit: int = DEFAULT_CHECK_IN_HISTORY_LIMIT) -> List[CheckIn]:
    """
    Get a habit's check-in history, newest first

    Args:
        habit_id: The habit ID
        limit: Maximum number of events to return
    """
    return [CheckIn(**row) for row in repository.get_check_ins_for_habit(habit_id, limit)]

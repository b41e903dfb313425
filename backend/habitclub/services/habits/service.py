"""
Habits Service - Business logic for habit management
Handles creating, reading, updating, and deleting habits
"""
from typing import Optional, Dict, Any, List, Union
import logging

from pydantic import ValidationError as PydanticValidationError

from habitclub.core.exceptions import (
    DuplicateError,
    DuplicateHabitError,
    HabitNotFoundError,
    InvalidHabitDataError,
    NotFoundError,
    UserNotFoundError
)
from habitclub.models.habit import Habit, HabitCreate, HabitStatus, HabitUpdate
from habitclub.utils.timezone import is_today
from . import repository

logger = logging.getLogger(__name__)


def _parse(model, data):
    if isinstance(data, model):
        return data
    try:
        return model(**(data or {}))
    except PydanticValidationError as e:
        raise InvalidHabitDataError(f"Invalid habit data: {e.errors()[0]['msg']}")


def create_habit(user_id: str, habit: Union[HabitCreate, Dict[str, Any]]) -> Habit:
    """
    Create a new habit for a user

    Args:
        user_id: Owning user
        habit: HabitCreate (or a dict with name, frequency, category)

    Returns:
        The stored habit, including its new id

    Raises:
        InvalidHabitDataError: If the name is blank or a field is invalid
        DuplicateHabitError: If the user already has a habit with this exact name
        UserNotFoundError: If the user has no profile yet
        DatabaseError: If database operation fails
    """
    habit = _parse(HabitCreate, habit)

    if repository.find_habit_by_name(user_id, habit.name):
        raise DuplicateHabitError(f"A habit named '{habit.name}' already exists")

    try:
        row = repository.create_habit(user_id, habit.name, habit.frequency.value, habit.category)
    except DuplicateError:
        # Lost the race against a concurrent create with the same name
        raise DuplicateHabitError(f"A habit named '{habit.name}' already exists")
    except NotFoundError:
        raise UserNotFoundError(f"User {user_id} has no profile")

    logger.info(f"Created habit '{habit.name}' for user_id={user_id}")
    return Habit(**row)


def get_habits(user_id: str) -> List[Habit]:
    """Get all habits owned by a user"""
    return [Habit(**row) for row in repository.get_habits_for_user(user_id)]


def get_habits_with_status(user_id: str) -> List[HabitStatus]:
    """
    Get a user's habits with today's check-in status

    Returns:
        List of habits, each flagged with checked_in_today
    """
    return [
        HabitStatus(**row, checked_in_today=is_today(row.get("last_check_in")))
        for row in repository.get_habits_for_user(user_id)
    ]


def get_habit(habit_id: str, user_id: Optional[str] = None) -> Habit:
    """
    Get a single habit

    Args:
        habit_id: The habit ID
        user_id: If given, the habit must belong to this user

    Raises:
        HabitNotFoundError: If missing or owned by someone else
    """
    row = repository.get_habit_by_id(habit_id)
    if row is None or (user_id is not None and row.get("user_id") != user_id):
        raise HabitNotFoundError(f"Habit {habit_id} not found")
    return Habit(**row)


def update_habit(habit_id: str, updates: Union[HabitUpdate, Dict[str, Any]],
                 user_id: Optional[str] = None) -> None:
    """
    Merge the given fields into an existing habit

    Only name, frequency and category can be changed; streak state belongs
    to the check-in engine.

    Raises:
        InvalidHabitDataError: If no editable field is given or a value is invalid
        HabitNotFoundError: If the habit does not exist (or is not the user's)
        DuplicateHabitError: If renaming onto another habit's name
    """
    updates = _parse(HabitUpdate, updates)
    changes = updates.changes()
    if not changes:
        raise InvalidHabitDataError("Must provide at least one of name, frequency or category")

    habit = get_habit(habit_id, user_id)

    if "name" in changes and changes["name"] != habit.name:
        existing = repository.find_habit_by_name(habit.user_id, changes["name"])
        if existing and existing["id"] != habit.id:
            raise DuplicateHabitError(f"A habit named '{changes['name']}' already exists")

    try:
        updated = repository.update_habit(habit_id, changes)
    except DuplicateError:
        raise DuplicateHabitError(f"A habit named '{changes['name']}' already exists")

    if updated is None:
        raise HabitNotFoundError(f"Habit {habit_id} not found")

    logger.info(f"Updated habit {habit_id}: {sorted(changes)}")


def delete_habit(habit_id: str, user_id: Optional[str] = None) -> None:
    """
    Delete a habit. Deleting a habit that does not exist is not an error.

    Args:
        habit_id: The habit ID
        user_id: If given, only delete when the habit belongs to this user

    Raises:
        HabitNotFoundError: If the habit exists but belongs to another user
    """
    if user_id is not None:
        row = repository.get_habit_by_id(habit_id)
        if row is None:
            return
        if row.get("user_id") != user_id:
            raise HabitNotFoundError(f"Habit {habit_id} not found")

    deleted = repository.delete_habit(habit_id)
    if deleted:
        logger.info(f"Deleted habit {habit_id}")

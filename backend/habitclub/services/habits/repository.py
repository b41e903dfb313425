"""
Habits Repository - Centralized database access layer
All Supabase queries for habits and check-ins
"""
from typing import List, Dict, Any, Optional

from habitclub.core.database import table, execute, chunked

HABITS = "habits"
CHECK_INS = "check_ins"


# ============================================================================
# HABITS TABLE
# ============================================================================

def get_habits_for_user(user_id: str) -> List[Dict[str, Any]]:
    """
    Get all habits owned by a user, oldest first

    Raises:
        DatabaseError: If query fails
    """
    query = table(HABITS).select("*").eq("user_id", user_id).order("created_at")
    return execute(query, f"fetching habits for user {user_id}")


def get_habit_by_id(habit_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a single habit by ID

    Returns:
        Habit dictionary or None if not found
    """
    rows = execute(
        table(HABITS).select("*").eq("id", habit_id),
        f"fetching habit {habit_id}"
    )
    return rows[0] if rows else None


def find_habit_by_name(user_id: str, name: str) -> Optional[Dict[str, Any]]:
    """
    Find a user's habit by exact (case-sensitive) name

    Returns:
        Habit dictionary or None if the user has no habit with that name
    """
    query = table(HABITS)\
        .select("id,name")\
        .eq("user_id", user_id)\
        .eq("name", name)\
        .limit(1)
    rows = execute(query, f"checking habit name for user {user_id}")
    return rows[0] if rows else None


def get_habit_names(habit_ids: List[str]) -> Dict[str, str]:
    """
    Look up habit names by id, one any-of query per batch

    Returns:
        Mapping of habit id to name for the habits that still exist
    """
    names = {}
    for batch in chunked(habit_ids):
        rows = execute(
            table(HABITS).select("id,name").in_("id", batch),
            "fetching habit names"
        )
        for row in rows:
            names[row["id"]] = row.get("name")
    return names


def create_habit(user_id: str, name: str, frequency: str, category: Optional[str]) -> Dict[str, Any]:
    """
    Create a new habit with a fresh streak

    created_at is assigned by the database.

    Raises:
        DuplicateError: If the (user_id, name) unique constraint is violated
        DatabaseError: If insert fails
    """
    habit_data = {
        "user_id": user_id,
        "name": name,
        "frequency": frequency,
        "category": category,
        "current_streak": 0,
        "last_check_in": None
    }
    rows = execute(table(HABITS).insert(habit_data), "creating habit")
    return rows[0] if rows else {}


def update_habit(habit_id: str, update_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Update a habit

    Returns:
        Updated habit data, or None if no habit has that ID
    """
    rows = execute(
        table(HABITS).update(update_data).eq("id", habit_id),
        f"updating habit {habit_id}"
    )
    return rows[0] if rows else None


def update_streak_if_unchanged(habit_id: str, expected_streak: Optional[int],
                               expected_last_check_in: Optional[str],
                               new_streak: int, new_last_check_in: str) -> Optional[Dict[str, Any]]:
    """
    Write new streak state only if the row still holds the values we read

    Args:
        habit_id: The habit ID
        expected_streak: current_streak as previously read
        expected_last_check_in: last_check_in as previously read (raw value, may be None)
        new_streak: Streak to store
        new_last_check_in: Server timestamp of the check-in being applied

    Returns:
        Updated habit data, or None if another writer got there first
        (or the habit is gone)
    """
    query = table(HABITS)\
        .update({"current_streak": new_streak, "last_check_in": new_last_check_in})\
        .eq("id", habit_id)

    if expected_streak is None:
        query = query.is_("current_streak", "null")
    else:
        query = query.eq("current_streak", expected_streak)

    if expected_last_check_in is None:
        query = query.is_("last_check_in", "null")
    else:
        query = query.eq("last_check_in", expected_last_check_in)

    rows = execute(query, f"updating streak for habit {habit_id}")
    return rows[0] if rows else None


def delete_habit(habit_id: str) -> Optional[Dict[str, Any]]:
    """
    Delete a habit. Its check-ins are left in place.

    Returns:
        Deleted habit data, or None if nothing was deleted
    """
    rows = execute(
        table(HABITS).delete().eq("id", habit_id),
        f"deleting habit {habit_id}"
    )
    return rows[0] if rows else None


# ============================================================================
# CHECK_INS TABLE
# ============================================================================

def create_check_in(habit_id: str, user_id: str) -> Dict[str, Any]:
    """
    Append a check-in event; created_at is the server's clock

    Returns:
        Created check-in data including id and created_at
    """
    rows = execute(
        table(CHECK_INS).insert({"habit_id": habit_id, "user_id": user_id}),
        f"recording check-in for habit {habit_id}"
    )
    return rows[0] if rows else {}


def get_check_ins_for_habit(habit_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Get check-ins for a habit, newest first

    Args:
        habit_id: The habit ID
        limit: Optional limit on number of results
    """
    query = table(CHECK_INS).select("*").eq("habit_id", habit_id).order("created_at", desc=True)
    if limit:
        query = query.limit(limit)
    return execute(query, f"fetching check-ins for habit {habit_id}")


def get_recent_check_ins_for_users(user_ids: List[str], limit: int) -> List[Dict[str, Any]]:
    """
    Get the most recent check-ins made by any of the given users

    Args:
        user_ids: At most one any-of batch of user IDs
        limit: Maximum rows to return

    Returns:
        Check-in rows ordered by created_at descending
    """
    query = table(CHECK_INS)\
        .select("id,habit_id,user_id,created_at")\
        .in_("user_id", user_ids)\
        .order("created_at", desc=True)\
        .limit(limit)
    return execute(query, "fetching recent check-ins")

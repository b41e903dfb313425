"""
Social Repository - Supabase queries for profiles and the following graph
"""
from typing import List, Dict, Any, Optional

from habitclub.core.database import table, execute, chunked

PROFILES = "profiles"
FOLLOWS = "follows"


# ============================================================================
# PROFILES TABLE
# ============================================================================

def get_profile(user_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a profile by user ID

    Returns:
        Profile dictionary or None if not found
    """
    rows = execute(
        table(PROFILES).select("*").eq("id", user_id),
        f"fetching profile {user_id}"
    )
    return rows[0] if rows else None


def find_profile_by_username(username: str) -> Optional[Dict[str, Any]]:
    """
    Find a profile whose username matches exactly, ignoring case

    Returns:
        Profile dictionary or None
    """
    rows = execute(
        table(PROFILES).select("id,username").ilike("username", escape_like(username)).limit(1),
        "checking username"
    )
    return rows[0] if rows else None


def create_profile(user_id: str, username: str, email: Optional[str] = None) -> Dict[str, Any]:
    """
    Create a profile row keyed by the identity provider's user ID

    Raises:
        DuplicateError: If the id or username is already taken
    """
    profile_data = {"id": user_id, "username": username}
    if email:
        profile_data["email"] = email

    rows = execute(table(PROFILES).insert(profile_data), f"creating profile {user_id}")
    return rows[0] if rows else {}


def search_profiles_by_prefix(prefix: str, limit: int) -> List[Dict[str, Any]]:
    """
    Case-insensitive username prefix search

    Args:
        prefix: Raw search text; LIKE wildcards in it are matched literally
        limit: Maximum number of rows

    Returns:
        List of {id, username} rows ordered by username
    """
    query = table(PROFILES)\
        .select("id,username")\
        .ilike("username", f"{escape_like(prefix)}%")\
        .order("username")\
        .limit(limit)
    return execute(query, "searching profiles")


def get_usernames(user_ids: List[str]) -> Dict[str, str]:
    """
    Look up usernames by id, one any-of query per batch

    Returns:
        Mapping of user id to username for profiles that exist
    """
    names = {}
    for batch in chunked(user_ids):
        rows = execute(
            table(PROFILES).select("id,username").in_("id", batch),
            "fetching usernames"
        )
        for row in rows:
            names[row["id"]] = row.get("username")
    return names


# ============================================================================
# FOLLOWS TABLE
# ============================================================================

def add_follow(follower_id: str, followee_id: str) -> None:
    """Insert a follow edge; an existing edge is left as is"""
    query = table(FOLLOWS).upsert(
        {"follower_id": follower_id, "followee_id": followee_id},
        on_conflict="follower_id,followee_id",
        ignore_duplicates=True
    )
    execute(query, f"following {followee_id} as {follower_id}")


def remove_follow(follower_id: str, followee_id: str) -> None:
    """Delete a follow edge if it exists"""
    query = table(FOLLOWS)\
        .delete()\
        .eq("follower_id", follower_id)\
        .eq("followee_id", followee_id)
    execute(query, f"unfollowing {followee_id} as {follower_id}")


def get_followee_ids(follower_id: str) -> List[str]:
    """IDs of everyone a user follows, in the order they were followed"""
    rows = execute(
        table(FOLLOWS).select("followee_id").eq("follower_id", follower_id).order("created_at"),
        f"fetching following for {follower_id}"
    )
    return [row["followee_id"] for row in rows]


def follow_exists(follower_id: str, followee_id: str) -> bool:
    rows = execute(
        table(FOLLOWS)
        .select("follower_id")
        .eq("follower_id", follower_id)
        .eq("followee_id", followee_id)
        .limit(1),
        "checking follow"
    )
    return bool(rows)


def escape_like(text: str) -> str:
    """Escape LIKE metacharacters so they match literally"""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

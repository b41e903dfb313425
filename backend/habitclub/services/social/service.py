"""
Social Service - Profiles, follow/unfollow and user search
"""
from typing import Optional, List, Set
import logging

from pydantic import ValidationError as PydanticValidationError

from habitclub.core.constants import MIN_SEARCH_TERM_LENGTH, SEARCH_RESULT_LIMIT, WILDCARD_CHARACTER
from habitclub.core.exceptions import (
    DuplicateError,
    InvalidSearchTermError,
    InvalidUsernameError,
    NotFoundError,
    SearchTermTooShortError,
    SelfFollowError,
    UserNotFoundError,
    UsernameTakenError
)
from habitclub.models.social import CreateProfileRequest, Profile, UserSummary
from . import repository

logger = logging.getLogger(__name__)


# ============================================================================
# PROFILES
# ============================================================================

def create_profile(user_id: str, username: str, email: Optional[str] = None) -> Profile:
    """
    Register the profile for an authenticated user

    Raises:
        InvalidUsernameError: If the username is too short, has spaces or contains '*'
        UsernameTakenError: If the username (in any case) or the profile already exists
    """
    try:
        request = CreateProfileRequest(username=username, email=email)
    except PydanticValidationError as e:
        raise InvalidUsernameError(f"Invalid username: {e.errors()[0]['msg']}")
    username, email = request.username, request.email

    if repository.find_profile_by_username(username):
        raise UsernameTakenError(f"Username '{username}' is already taken")

    try:
        row = repository.create_profile(user_id, username, email)
    except DuplicateError:
        raise UsernameTakenError(f"Username '{username}' is already taken")

    logger.info(f"Created profile '{username}' for user_id={user_id}")
    return Profile(**row)


def get_profile(user_id: str) -> Profile:
    """
    Get a profile together with its following set

    Raises:
        UserNotFoundError: If the user has no profile
    """
    row = repository.get_profile(user_id)
    if row is None:
        raise UserNotFoundError(f"User {user_id} not found")
    return Profile(**row, following=set(repository.get_followee_ids(user_id)))


# ============================================================================
# FOLLOWING
# ============================================================================

def follow(current_user_id: str, target_user_id: str) -> None:
    """
    Add target_user_id to the current user's following set

    Following someone already followed is a no-op.

    Raises:
        SelfFollowError: If both IDs are the same
        UserNotFoundError: If either user has no profile
    """
    if current_user_id == target_user_id:
        raise SelfFollowError("Cannot follow yourself")

    if repository.get_profile(target_user_id) is None:
        raise UserNotFoundError(f"User {target_user_id} not found")

    try:
        repository.add_follow(current_user_id, target_user_id)
    except NotFoundError:
        # The follower has no profile, or the target was removed in between
        raise UserNotFoundError(f"Cannot follow {target_user_id} as {current_user_id}: profile missing")

    logger.info(f"User {current_user_id} followed {target_user_id}")


def unfollow(current_user_id: str, target_user_id: str) -> None:
    """Remove target_user_id from the following set; silent if not followed"""
    repository.remove_follow(current_user_id, target_user_id)
    logger.info(f"User {current_user_id} unfollowed {target_user_id}")


def get_following(user_id: str) -> Set[str]:
    """Get the set of user IDs this user follows"""
    return set(repository.get_followee_ids(user_id))


def is_following(user_id: str, target_user_id: str) -> bool:
    return repository.follow_exists(user_id, target_user_id)


# ============================================================================
# SEARCH
# ============================================================================

def search_users(term: str, exclude_user_id: Optional[str] = None) -> List[UserSummary]:
    """
    Find users whose username starts with `term`, ignoring case

    Args:
        term: Search text, at least 2 characters after trimming
        exclude_user_id: Usually the searcher; never included in results

    Returns:
        Matching users ordered by username

    Raises:
        SearchTermTooShortError: If the term is shorter than 2 characters
        InvalidSearchTermError: If the term contains '*'
    """
    term = (term or "").strip()
    if len(term) < MIN_SEARCH_TERM_LENGTH:
        raise SearchTermTooShortError(
            f"Search term must be at least {MIN_SEARCH_TERM_LENGTH} characters"
        )
    if WILDCARD_CHARACTER in term:
        raise InvalidSearchTermError(f"Search term may not contain '{WILDCARD_CHARACTER}'")

    prefix = term.lower()
    # One extra row so excluding the searcher still leaves a full page
    rows = repository.search_profiles_by_prefix(term, SEARCH_RESULT_LIMIT + 1)

    results = [
        UserSummary(id=row["id"], username=row["username"])
        for row in rows
        if row["id"] != exclude_user_id
        and (row.get("username") or "").lower().startswith(prefix)
    ]
    return results[:SEARCH_RESULT_LIMIT]

"""
Activity Feed - Recent check-ins from followed users, joined for display
"""
from typing import Iterable, List
import logging

from habitclub.core.constants import (
    ANY_OF_BATCH_LIMIT,
    FEED_LIMIT,
    MISSING_TIMESTAMP,
    UNKNOWN_HABIT,
    UNKNOWN_USER
)
from habitclub.models.social import FeedEntry
from habitclub.services.habits import repository as habits_repository
from habitclub.services.social import repository as social_repository
from habitclub.utils.timezone import format_local_time, normalize_timestamp

logger = logging.getLogger(__name__)


def get_friends_activity_feed(following_user_ids: Iterable[str]) -> List[FeedEntry]:
    """
    Build the activity feed for a set of followed users

    Only the first 10 distinct IDs are queried, since one any-of filter
    cannot carry more. Check-ins whose habit or user no longer exists are
    shown with placeholder names instead of failing the feed.

    Args:
        following_user_ids: IDs the viewer follows

    Returns:
        Up to 50 feed entries, newest check-in first
    """
    user_ids = list(dict.fromkeys(uid for uid in following_user_ids if uid))
    if not user_ids:
        return []

    if len(user_ids) > ANY_OF_BATCH_LIMIT:
        logger.warning(
            f"[FEED] Following {len(user_ids)} users; only the first {ANY_OF_BATCH_LIMIT} are included"
        )
        user_ids = user_ids[:ANY_OF_BATCH_LIMIT]

    activities = habits_repository.get_recent_check_ins_for_users(user_ids, FEED_LIMIT)
    if not activities:
        return []

    habit_ids = list(dict.fromkeys(a["habit_id"] for a in activities if a.get("habit_id")))
    author_ids = list(dict.fromkeys(a["user_id"] for a in activities if a.get("user_id")))

    habit_names = habits_repository.get_habit_names(habit_ids) if habit_ids else {}
    usernames = social_repository.get_usernames(author_ids) if author_ids else {}

    feed = []
    for activity in activities:
        created_at = activity.get("created_at")
        feed.append(FeedEntry(
            id=activity["id"],
            habit_id=activity.get("habit_id"),
            user_id=activity.get("user_id"),
            username=usernames.get(activity.get("user_id")) or UNKNOWN_USER,
            habit_name=habit_names.get(activity.get("habit_id")) or UNKNOWN_HABIT,
            timestamp=format_local_time(created_at) or MISSING_TIMESTAMP,
            checked_in_at=normalize_timestamp(created_at)
        ))

    logger.debug(f"[FEED] Built {len(feed)} entries for {len(user_ids)} followed users")
    return feed


def get_feed_for_user(user_id: str) -> List[FeedEntry]:
    """Activity feed for everyone the given user follows"""
    return get_friends_activity_feed(social_repository.get_followee_ids(user_id))

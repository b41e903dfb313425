"""
Feed module - Social activity feed aggregation
"""
from . import service

from .service import get_friends_activity_feed, get_feed_for_user

__all__ = ['service', 'get_friends_activity_feed', 'get_feed_for_user']

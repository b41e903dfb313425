"""
Social module - Profiles, following graph and user search
"""
from . import repository
from . import service

from .service import (
    create_profile,
    get_profile,
    follow,
    unfollow,
    get_following,
    is_following,
    search_users
)

__all__ = [
    'repository',
    'service',
    'create_profile',
    'get_profile',
    'follow',
    'unfollow',
    'get_following',
    'is_following',
    'search_users'
]

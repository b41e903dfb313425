"""
Business logic services
"""
from . import habits
from . import social
from . import feed

__all__ = [
    'habits',
    'social',
    'feed'
]

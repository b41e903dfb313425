"""
Habits module - Habit CRUD, check-ins and streaks
"""
from . import repository
from . import service
from . import streaks
from . import checkins

# Export commonly used functions for convenience
from .service import (
    create_habit,
    get_habits,
    get_habits_with_status,
    get_habit,
    update_habit,
    delete_habit
)

from .checkins import (
    check_in,
    get_check_ins
)

__all__ = [
    # Modules
    'repository',
    'service',
    'streaks',
    'checkins',

    # Service functions
    'create_habit',
    'get_habits',
    'get_habits_with_status',
    'get_habit',
    'update_habit',
    'delete_habit',

    # Check-in functions
    'check_in',
    'get_check_ins'
]

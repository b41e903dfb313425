"""
Pydantic models for the application
"""
from habitclub.models.habit import (
    Frequency,
    HabitCreate,
    HabitUpdate,
    Habit,
    HabitStatus,
    CheckIn,
    CheckInResult
)
from habitclub.models.social import (
    CreateProfileRequest,
    UserSummary,
    Profile,
    FollowingResponse,
    FeedEntry
)

__all__ = [
    "Frequency",
    "HabitCreate",
    "HabitUpdate",
    "Habit",
    "HabitStatus",
    "CheckIn",
    "CheckInResult",
    "CreateProfileRequest",
    "UserSummary",
    "Profile",
    "FollowingResponse",
    "FeedEntry"
]

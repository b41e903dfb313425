"""
Pydantic models for habits and check-ins
"""
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from habitclub.core.constants import DEFAULT_HABIT_CATEGORY


class Frequency(str, Enum):
    """How often a habit is meant to be done"""
    DAILY = "daily"
    WEEKLY = "weekly"


def _clean_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Habit name must not be blank")
    return v


class HabitCreate(BaseModel):
    """Request model for creating a habit"""
    name: str = Field(..., min_length=1, max_length=100, description="Habit name, unique per user")
    frequency: Frequency = Field(Frequency.DAILY, description="'daily' or 'weekly'")
    category: str = Field(DEFAULT_HABIT_CATEGORY, max_length=50, description="Free-form category label")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Strip whitespace and reject blank names"""
        return _clean_name(v)


class HabitUpdate(BaseModel):
    """Request model for a partial habit update"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    frequency: Optional[Frequency] = None
    category: Optional[str] = Field(None, max_length=50)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace and reject blank names if provided"""
        return _clean_name(v)

    def changes(self) -> dict:
        """Fields the caller actually set, ready to write"""
        return self.model_dump(exclude_none=True, mode="json")


class Habit(BaseModel):
    """A stored habit record"""
    id: str
    user_id: str
    name: str
    frequency: Frequency = Frequency.DAILY
    category: Optional[str] = None
    current_streak: int = Field(0, ge=0)
    last_check_in: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @field_validator('current_streak', mode='before')
    @classmethod
    def default_streak(cls, v):
        """Treat a missing counter as zero"""
        return 0 if v is None else v


class HabitStatus(Habit):
    """Habit plus whether it has been checked in today"""
    checked_in_today: bool = False


class CheckIn(BaseModel):
    """An immutable check-in event"""
    id: str
    habit_id: str
    user_id: str
    created_at: Optional[datetime] = None


class CheckInResult(BaseModel):
    """Outcome of a check-in"""
    check_in: CheckIn
    habit_id: str
    current_streak: int
    last_check_in: Optional[datetime] = None
    streak_updated: bool = Field(..., description="False when the habit was already checked in today")

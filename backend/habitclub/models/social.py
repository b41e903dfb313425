"""
Pydantic models for profiles, the following graph and the activity feed
"""
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Set

from habitclub.core.constants import WILDCARD_CHARACTER


class CreateProfileRequest(BaseModel):
    """Request model for registering the caller's profile"""
    username: str = Field(..., min_length=2, max_length=30, description="Public username")
    email: Optional[str] = Field(None, max_length=254)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Usernames are stored trimmed and may not contain whitespace or '*'"""
        v = v.strip()
        if len(v) < 2 or any(ch.isspace() for ch in v):
            raise ValueError("Username must be at least 2 characters with no spaces")
        if WILDCARD_CHARACTER in v:
            raise ValueError(f"Username may not contain '{WILDCARD_CHARACTER}'")
        return v


class UserSummary(BaseModel):
    """Public view of a user, as returned by search"""
    id: str
    username: str


class Profile(UserSummary):
    """A user's profile along with who they follow"""
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    following: Set[str] = Field(default_factory=set)


class FollowingResponse(BaseModel):
    """The caller's following set"""
    user_id: str
    following: List[str]
    count: int


class FeedEntry(BaseModel):
    """A check-in joined with display names, ready to render"""
    id: str
    habit_id: Optional[str] = None
    user_id: Optional[str] = None
    username: str
    habit_name: str
    timestamp: str = Field(..., description="Local time of the check-in, or 'N/A'")
    checked_in_at: Optional[datetime] = None

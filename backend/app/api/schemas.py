"""Response models shared across API packages."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from app.domain.accounts.models import User


class UserSummaryResponse(BaseModel):
    """Public identity of a user."""
    id: str
    name: str
    username: str
    avatar_url: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserSummaryResponse":
        return cls(**user.summary())


class UserResponse(UserSummaryResponse):
    """The authenticated user's own account."""
    email: str
    bio: Optional[str] = None
    profile_visibility: str
    signup_date: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            **user.summary(),
            email=user.email,
            bio=user.bio,
            profile_visibility=user.profile_visibility.value,
            signup_date=user.signup_date,
        )

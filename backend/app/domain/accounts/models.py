"""Account domain models."""
import enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr

from app.domain.common.types import generate_id


class ProfileVisibility(str, enum.Enum):
    """Who may see a user's profile and posts."""
    PUBLIC = "PUBLIC"
    FRIENDS = "FRIENDS"
    PRIVATE = "PRIVATE"


class User(BaseModel):
    """User domain model."""

    id: str
    email: EmailStr
    password_hash: str
    name: str
    username: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    profile_visibility: ProfileVisibility = ProfileVisibility.PUBLIC
    signup_date: datetime
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(cls, email: str, password_hash: str, name: str, username: str) -> "User":
        """Create a new user."""
        now = datetime.utcnow()
        return cls(
            id=generate_id(),
            email=email,
            password_hash=password_hash,
            name=name,
            username=username,
            profile_visibility=ProfileVisibility.PUBLIC,
            signup_date=now,
            created_at=now,
            updated_at=now,
        )

    def summary(self) -> dict:
        """Public identity fields (what other users always get to see)."""
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "avatar_url": self.avatar_url,
        }


class UserSettings(BaseModel):
    """Per-user notification and display preferences."""

    user_id: str
    email_notifications: bool = True
    habit_reminders: bool = True
    weekly_reports: bool = False
    show_streak: bool = True
    show_activity: bool = True

    @classmethod
    def defaults(cls, user_id: str) -> "UserSettings":
        return cls(user_id=user_id)

"""User database models."""
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text, Enum as SQLEnum

from app.infra.db.base import Base
from app.domain.accounts.models import (
    User as UserEntity,
    UserSettings as UserSettingsEntity,
    ProfileVisibility,
)


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String, nullable=True)  # /uploads/avatars/<file>
    profile_visibility = Column(
        SQLEnum(ProfileVisibility), nullable=False, default=ProfileVisibility.PUBLIC
    )
    signup_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_entity(self) -> UserEntity:
        """Convert to domain entity."""
        return UserEntity(
            id=self.id,
            email=self.email,
            password_hash=self.password_hash,
            name=self.name,
            username=self.username,
            bio=self.bio,
            avatar_url=self.avatar_url,
            profile_visibility=self.profile_visibility or ProfileVisibility.PUBLIC,
            signup_date=self.signup_date,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_entity(cls, entity: UserEntity) -> "UserModel":
        """Create from domain entity."""
        return cls(
            id=entity.id,
            email=entity.email,
            password_hash=entity.password_hash,
            name=entity.name,
            username=entity.username,
            bio=entity.bio,
            avatar_url=entity.avatar_url,
            profile_visibility=entity.profile_visibility,
            signup_date=entity.signup_date,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class UserSettingsModel(Base):
    """Notification/display preferences, one row per user (absent row = defaults)."""

    __tablename__ = "user_settings"

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    email_notifications = Column(Boolean, default=True, nullable=False)
    habit_reminders = Column(Boolean, default=True, nullable=False)
    weekly_reports = Column(Boolean, default=False, nullable=False)
    show_streak = Column(Boolean, default=True, nullable=False)
    show_activity = Column(Boolean, default=True, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_entity(self) -> UserSettingsEntity:
        return UserSettingsEntity(
            user_id=self.user_id,
            email_notifications=self.email_notifications,
            habit_reminders=self.habit_reminders,
            weekly_reports=self.weekly_reports,
            show_streak=self.show_streak,
            show_activity=self.show_activity,
        )

"""Account domain services: signup/login, profiles and settings."""
import logging
import re
import secrets
from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.accounts.models import User, UserSettings, ProfileVisibility
from app.domain.common.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.domain.common.types import Clock
from app.domain.habits.streaks import current_streak
from app.domain.social.models import ProfileAccess
from app.domain.social.policies import VisibilityPolicy
from app.infra.db.repositories.badge_repo import BadgeRepository
from app.infra.db.repositories.habit_repo import HabitRepository
from app.infra.db.repositories.post_repo import PostRepository
from app.infra.db.repositories.social_repo import SocialGraphRepositoryImpl
from app.infra.db.repositories.user_repo import UserRepositoryImpl
from app.infra.security.password import get_password_hash, verify_password
from app.infra.storage.avatars import AvatarStorage

logger = logging.getLogger(__name__)

_USERNAME_CHARS = re.compile(r"[^a-z0-9_.]")


def username_from_email(email: str) -> str:
    """Slug of the email local part, used when signup omits a username."""
    local = email.split("@", 1)[0].lower()
    return _USERNAME_CHARS.sub("", local)[:24] or "user"


class AuthService:
    """Signup and login."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepositoryImpl(db)

    async def _unique_username(self, base: str) -> str:
        candidate = base
        while await self.users.get_by_username(candidate):
            candidate = f"{base}{secrets.randbelow(10000):04d}"
        return candidate

    async def signup(self, email: str, password: str, name: str, username: Optional[str] = None) -> User:
        email = (email or "").strip().lower()
        name = (name or "").strip()
        if not email or not password or not name:
            raise ValidationError("Email, password and name are required")
        if await self.users.get_by_email(email):
            raise ConflictError("Email already registered")

        if username is not None and username.strip():
            username = username.strip()
            if await self.users.get_by_username(username):
                raise ConflictError("Username already taken")
        else:
            username = await self._unique_username(username_from_email(email))

        user = User.create(
            email=email,
            password_hash=get_password_hash(password),
            name=name,
            username=username,
        )
        try:
            user = await self.users.create(user)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Email or username already in use")
        logger.info("User %s signed up (%s)", user.id, user.username)
        return user

    async def login(self, email: str, password: str) -> User:
        user = await self.users.get_by_email((email or "").strip())
        if user is None or not verify_password(password or "", user.password_hash):
            logger.warning("Login failed for %s", email)
            raise AuthenticationError("Invalid credentials")
        return user


class ProfileService:
    """Profile views (privacy-aware) and profile edits."""

    def __init__(self, db: AsyncSession, clock: Optional[Clock] = None, storage: Optional[AvatarStorage] = None):
        self.db = db
        self.clock = clock or date.today
        self.users = UserRepositoryImpl(db)
        self.graph = SocialGraphRepositoryImpl(db)
        self.policy = VisibilityPolicy(self.graph)
        self.storage = storage or AvatarStorage()

    async def _longest_streak(self, user_id: str) -> int:
        today = self.clock()
        habits = await HabitRepository(self.db).list_by_user(user_id)
        return max((current_streak(h, today) for h in habits), default=0)

    async def _badges(self, user_id: str) -> list[dict]:
        unlocked = await BadgeRepository(self.db).list_user_badges(user_id)
        return [
            {
                "id": ub.badge.id,
                "name": ub.badge.name,
                "description": ub.badge.description,
                "icon": ub.badge.icon,
                "type": ub.badge.type.value,
                "unlocked_at": ub.unlocked_at,
            }
            for ub in unlocked
        ]

    async def _counts(self, user_id: str) -> dict:
        return {
            "friend_count": await self.graph.count_accepted(user_id),
            "post_count": await PostRepository(self.db).count_by_user(user_id),
        }

    async def own_profile(self, user: User) -> dict:
        return {
            **user.summary(),
            "email": user.email,
            "bio": user.bio,
            "profile_visibility": user.profile_visibility.value,
            "signup_date": user.signup_date,
            "created_at": user.created_at,
            **await self._counts(user.id),
            "streak": await self._longest_streak(user.id),
            "badges": await self._badges(user.id),
            "is_restricted": False,
        }

    async def view_profile(self, viewer: User, target_id: str) -> dict:
        """Profile of target_id as seen by viewer: full, restricted, or refused."""
        target = await self.users.get_by_id(target_id)
        if target is None:
            raise NotFoundError("User", target_id)
        if target.id == viewer.id:
            return await self.own_profile(viewer)

        access = await self.policy.can_view_profile(viewer.id, target)
        if access == ProfileAccess.DENIED:
            if await self.graph.is_blocked_between(viewer.id, target.id):
                raise AuthorizationError("User is blocked")
            raise AuthorizationError("Profile is private")

        base = {
            **target.summary(),
            "profile_visibility": target.profile_visibility.value,
            **await self._counts(target.id),
        }
        if access == ProfileAccess.RESTRICTED:
            return {**base, "is_restricted": True}

        prefs = await self.users.get_settings(target.id) or UserSettings.defaults(target.id)
        profile = {
            **base,
            "bio": target.bio,
            "signup_date": target.signup_date,
            "badges": await self._badges(target.id),
            "is_restricted": False,
        }
        if prefs.show_streak:
            profile["streak"] = await self._longest_streak(target.id)
        return profile

    async def update_profile(
        self,
        user: User,
        name: Optional[str] = None,
        bio: Optional[str] = None,
        username: Optional[str] = None,
    ) -> User:
        if name is not None and not name.strip():
            raise ValidationError("Name cannot be empty")
        if username is not None:
            username = username.strip()
            if not username:
                raise ValidationError("Username cannot be empty")
            other = await self.users.get_by_username(username)
            if other is not None and other.id != user.id:
                raise ConflictError("Username already taken")
        try:
            updated = await self.users.update_fields(
                user.id,
                name=name.strip() if name is not None else None,
                bio=bio,
                username=username,
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Username already taken")
        return updated

    async def set_avatar(
        self, user: User, filename: Optional[str], content_type: Optional[str], content: bytes
    ) -> str:
        """Store a new avatar, point the user at it and remove the previous file."""
        ext = self.storage.validate(filename, content_type, content)
        avatar_url = self.storage.save(ext, content)
        try:
            await self.users.set_avatar_url(user.id, avatar_url)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            self.storage.delete(avatar_url)
            raise
        self.storage.delete(user.avatar_url)
        logger.info("Avatar updated for user %s", user.id)
        return avatar_url

    async def remove_avatar(self, user: User) -> None:
        if not user.avatar_url:
            raise NotFoundError("Avatar")
        await self.users.set_avatar_url(user.id, None)
        await self.db.commit()
        self.storage.delete(user.avatar_url)


class SettingsService:
    """Account settings: preferences, email/name, password, privacy."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepositoryImpl(db)

    async def get_settings(self, user: User) -> UserSettings:
        return await self.users.get_settings(user.id) or UserSettings.defaults(user.id)

    async def update_preferences(self, user: User, **values) -> UserSettings:
        prefs = await self.users.upsert_settings(user.id, **values)
        await self.db.commit()
        return prefs

    async def update_account(self, user: User, name: Optional[str] = None, email: Optional[str] = None) -> User:
        if email is not None:
            email = email.strip().lower()
            other = await self.users.get_by_email(email)
            if other is not None and other.id != user.id:
                raise ConflictError("Email already in use")
        try:
            updated = await self.users.update_fields(
                user.id,
                name=name.strip() if name and name.strip() else None,
                email=email or None,
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Email already in use")
        return updated

    async def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not current_password or not new_password:
            raise ValidationError("All fields are required")
        if not verify_password(current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")
        await self.users.update_fields(user.id, password_hash=get_password_hash(new_password))
        await self.db.commit()
        logger.info("Password changed for user %s", user.id)

    async def update_privacy(
        self,
        user: User,
        profile_visibility: Optional[ProfileVisibility] = None,
        show_streak: Optional[bool] = None,
        show_activity: Optional[bool] = None,
    ) -> tuple[User, UserSettings]:
        try:
            if profile_visibility is not None:
                user = await self.users.update_fields(user.id, profile_visibility=profile_visibility)
            prefs = await self.users.upsert_settings(
                user.id, show_streak=show_streak, show_activity=show_activity
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info("Privacy updated for user %s (visibility=%s)", user.id, user.profile_visibility.value)
        return user, prefs

"""User repository implementation."""
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func

from app.domain.accounts.models import User, UserSettings
from app.infra.db.models.user import UserModel, UserSettingsModel


class UserRepositoryImpl:
    """User repository implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        """Create a new user."""
        model = UserModel.from_entity(user)
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        result = await self.session.execute(select(UserModel).where(UserModel.id == user_id))
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def get_by_ids(self, user_ids: set[str]) -> dict[str, User]:
        """Fetch several users at once, keyed by id."""
        if not user_ids:
            return {}
        result = await self.session.execute(select(UserModel).where(UserModel.id.in_(list(user_ids))))
        return {m.id: m.to_entity() for m in result.scalars().all()}

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        result = await self.session.execute(
            select(UserModel).where(func.lower(UserModel.email) == email.strip().lower())
        )
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by exact username."""
        result = await self.session.execute(select(UserModel).where(UserModel.username == username))
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def search_by_username(
        self, query: str, exclude_ids: set[str], limit: int = 10
    ) -> list[User]:
        """Case-insensitive substring match on username."""
        q = (
            select(UserModel)
            .where(UserModel.username.icontains(query, autoescape=True))
            .order_by(UserModel.username)
            .limit(limit)
        )
        if exclude_ids:
            q = q.where(UserModel.id.notin_(list(exclude_ids)))
        result = await self.session.execute(q)
        return [m.to_entity() for m in result.scalars().all()]

    async def update_fields(self, user_id: str, **values) -> Optional[User]:
        """Update the given columns (None values are skipped)."""
        values = {k: v for k, v in values.items() if v is not None}
        if values:
            values["updated_at"] = datetime.utcnow()
            await self.session.execute(
                update(UserModel).where(UserModel.id == user_id).values(**values)
            )
            await self.session.flush()
        return await self.get_by_id(user_id)

    async def set_avatar_url(self, user_id: str, avatar_url: Optional[str]) -> None:
        """Set or clear the avatar reference."""
        await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(avatar_url=avatar_url, updated_at=datetime.utcnow())
        )
        await self.session.flush()

    async def get_settings(self, user_id: str) -> Optional[UserSettings]:
        """Stored preferences, or None when the user never saved any."""
        model = await self.session.get(UserSettingsModel, user_id)
        return model.to_entity() if model else None

    async def upsert_settings(self, user_id: str, **values) -> UserSettings:
        """Create or partially update the preferences row."""
        values = {k: v for k, v in values.items() if v is not None}
        model = await self.session.get(UserSettingsModel, user_id)
        if model is None:
            model = UserSettingsModel(user_id=user_id, **UserSettings.defaults(user_id).model_dump(exclude={"user_id"}))
            self.session.add(model)
        for key, value in values.items():
            setattr(model, key, value)
        model.updated_at = datetime.utcnow()
        await self.session.flush()
        return model.to_entity()

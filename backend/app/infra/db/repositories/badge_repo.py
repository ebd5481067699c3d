"""Badge repository."""
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.domain.common.types import generate_id
from app.domain.badges.models import Badge, BadgeType, UserBadge
from app.infra.db.models.badge import BadgeModel, UserBadgeModel


class BadgeRepository:
    """Badge catalogue and unlocks."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_badges(self, badge_type: Optional[BadgeType] = None) -> list[Badge]:
        q = select(BadgeModel).order_by(BadgeModel.threshold, BadgeModel.name)
        if badge_type is not None:
            q = q.where(BadgeModel.type == badge_type)
        result = await self.session.execute(q)
        return [m.to_entity() for m in result.scalars().all()]

    async def get_by_name(self, name: str) -> Optional[Badge]:
        result = await self.session.execute(select(BadgeModel).where(BadgeModel.name == name))
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def create_badge(
        self, name: str, description: str, icon: str, badge_type: BadgeType, threshold: int
    ) -> Badge:
        model = BadgeModel(
            id=generate_id(),
            name=name,
            description=description,
            icon=icon,
            type=badge_type,
            threshold=threshold,
        )
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

    async def unlocked_ids(self, user_id: str) -> set[str]:
        result = await self.session.execute(
            select(UserBadgeModel.badge_id).where(UserBadgeModel.user_id == user_id)
        )
        return set(result.scalars().all())

    async def add_user_badge(self, user_id: str, badge_id: str) -> UserBadge:
        model = UserBadgeModel(
            id=generate_id(),
            user_id=user_id,
            badge_id=badge_id,
            unlocked_at=datetime.utcnow(),
        )
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

    async def list_user_badges(self, user_id: str) -> list[UserBadge]:
        """Unlocked badges with their catalogue entry, oldest unlock first."""
        result = await self.session.execute(
            select(UserBadgeModel, BadgeModel)
            .join(BadgeModel, BadgeModel.id == UserBadgeModel.badge_id)
            .where(UserBadgeModel.user_id == user_id)
            .order_by(UserBadgeModel.unlocked_at)
        )
        unlocked = []
        for user_badge, badge in result.all():
            entity = user_badge.to_entity()
            entity.badge = badge.to_entity()
            unlocked.append(entity)
        return unlocked

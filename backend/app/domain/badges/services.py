"""Badge domain services."""
import logging
from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.badges.models import Badge, BadgeType, DEFAULT_BADGES
from app.domain.common.types import Clock
from app.domain.habits.streaks import current_streak
from app.domain.notifications.models import NotificationType
from app.infra.db.repositories.badge_repo import BadgeRepository
from app.infra.db.repositories.habit_repo import HabitRepository
from app.infra.db.repositories.social_repo import SocialGraphRepositoryImpl
from app.services.notification_service import deliver_notification

logger = logging.getLogger(__name__)


class BadgeService:
    """Awards badges when a user's metric reaches a catalogue threshold.

    Writes are flushed into the caller's transaction; the caller commits.
    """

    def __init__(self, db: AsyncSession, clock: Optional[Clock] = None):
        self.db = db
        self.clock = clock or date.today
        self.repo = BadgeRepository(db)

    async def metric(self, user_id: str, badge_type: BadgeType, today: Optional[date] = None) -> int:
        if badge_type == BadgeType.HABIT_COUNT:
            return await HabitRepository(self.db).count_by_user(user_id)
        if badge_type == BadgeType.STREAK:
            today = today or self.clock()
            habits = await HabitRepository(self.db).list_by_user(user_id)
            return max((current_streak(h, today) for h in habits), default=0)
        return await SocialGraphRepositoryImpl(self.db).count_accepted(user_id)

    async def evaluate(self, user_id: str, badge_type: BadgeType, today: Optional[date] = None) -> list[Badge]:
        """Unlock every badge of badge_type whose threshold is met; returns the newly unlocked ones."""
        candidates = await self.repo.list_badges(badge_type)
        if not candidates:
            return []
        unlocked = await self.repo.unlocked_ids(user_id)
        pending = [b for b in candidates if b.id not in unlocked]
        if not pending:
            return []

        value = await self.metric(user_id, badge_type, today)
        awarded = []
        for badge in pending:
            if value < badge.threshold:
                continue
            await self.repo.add_user_badge(user_id, badge.id)
            await deliver_notification(
                self.db,
                user_id,
                NotificationType.ACHIEVEMENT,
                None,
                badge.id,
                f'Unlocked "{badge.name}" badge!',
            )
            logger.info("Badge %r unlocked for user %s (%s=%d)", badge.name, user_id, badge_type.value, value)
            awarded.append(badge)
        return awarded

    async def catalogue_for(self, user_id: str) -> list[tuple[Badge, bool]]:
        """All badges with whether user_id has unlocked each."""
        unlocked = await self.repo.unlocked_ids(user_id)
        return [(badge, badge.id in unlocked) for badge in await self.repo.list_badges()]

    async def seed_defaults(self) -> int:
        """Insert missing catalogue entries. Returns how many were created."""
        created = 0
        for name, description, icon, badge_type, threshold in DEFAULT_BADGES:
            if await self.repo.get_by_name(name):
                continue
            await self.repo.create_badge(name, description, icon, badge_type, threshold)
            created += 1
        return created

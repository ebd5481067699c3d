"""Habit domain services."""
import logging
from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.badges.models import BadgeType
from app.domain.badges.services import BadgeService
from app.domain.common.errors import NotFoundError, ValidationError
from app.domain.common.types import Clock, date_key
from app.domain.habits.models import Habit, DailyActivity
from app.domain.habits.streaks import apply_completion, current_streak, is_completed_on
from app.infra.db.repositories.habit_repo import HabitRepository

logger = logging.getLogger(__name__)

# client calendar dates may differ from the server's by a timezone, never more
MAX_CLIENT_DAY_OFFSET = 1


class HabitService:
    """Habit CRUD, completion toggling and activity snapshots."""

    def __init__(self, db: AsyncSession, clock: Optional[Clock] = None, badges: Optional[BadgeService] = None):
        self.db = db
        self.clock = clock or date.today
        self.repo = HabitRepository(db)
        self.badges = badges or BadgeService(db, self.clock)

    def as_of(self, habit: Habit, today: date) -> Habit:
        """The habit as it reads today: stale completion flags and lapsed streaks are not reported."""
        habit.completed_today = is_completed_on(habit, today) and habit.completed_today
        habit.streak = current_streak(habit, today)
        return habit

    async def _owned(self, user_id: str, habit_id: str) -> Habit:
        habit = await self.repo.get(habit_id)
        if habit is None or habit.user_id != user_id:
            raise NotFoundError("Habit", habit_id)
        return habit

    async def list_habits(self, user_id: str) -> list[Habit]:
        today = self.clock()
        return [self.as_of(h, today) for h in await self.repo.list_by_user(user_id)]

    async def create_habit(
        self,
        user_id: str,
        name: str,
        category: Optional[str] = None,
        scheduled_time: Optional[str] = None,
        is_private: bool = False,
    ) -> Habit:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Habit name is required")
        try:
            habit = await self.repo.create(
                user_id=user_id,
                name=name,
                category=category or "General",
                scheduled_time=scheduled_time,
                is_private=is_private,
            )
            await self.badges.evaluate(user_id, BadgeType.HABIT_COUNT)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return habit

    async def update_habit(
        self,
        user_id: str,
        habit_id: str,
        name: Optional[str] = None,
        category: Optional[str] = None,
        scheduled_time: Optional[str] = None,
        is_private: Optional[bool] = None,
        completed_today: Optional[bool] = None,
        today: Optional[date] = None,
    ) -> Habit:
        """Partial update. today is the client's calendar date, at most one day off the server's."""
        server_today = self.clock()
        if today is None:
            today = server_today
        elif abs((today - server_today).days) > MAX_CLIENT_DAY_OFFSET:
            logger.warning("Habit %s update refused: client date %s, server date %s", habit_id, today, server_today)
            raise ValidationError("date must be within one day of today")
        habit = await self._owned(user_id, habit_id)
        if (
            completed_today is not None
            and habit.last_completed_date
            and date_key(today) < habit.last_completed_date
        ):
            raise ValidationError("date is earlier than the last completion")
        habit = self.as_of(habit, today)
        if name is not None:
            if not name.strip():
                raise ValidationError("Habit name cannot be empty")
            habit.name = name.strip()
        if category is not None:
            habit.category = category
        if scheduled_time is not None:
            habit.scheduled_time = scheduled_time or None
        if is_private is not None:
            habit.is_private = is_private

        try:
            if completed_today is not None:
                before = habit.streak
                apply_completion(habit, completed_today, today)
                if habit.streak != before:
                    logger.info("Habit %s streak %d -> %d", habit.id, before, habit.streak)
            habit = await self.repo.save(habit)
            if completed_today:
                await self.badges.evaluate(user_id, BadgeType.STREAK, today=today)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return self.as_of(habit, today)

    async def delete_habit(self, user_id: str, habit_id: str) -> None:
        await self._owned(user_id, habit_id)
        await self.repo.delete(habit_id)
        await self.db.commit()

    async def record_activity(
        self,
        user_id: str,
        day: str,
        completed_habits: list[str],
        total_habits: int,
        completion_rate: float,
    ) -> DailyActivity:
        """Upsert the (user, date) snapshot."""
        try:
            parsed = date.fromisoformat(day)
        except (TypeError, ValueError):
            raise ValidationError("date must be YYYY-MM-DD")
        activity = await self.repo.upsert_activity(
            user_id=user_id,
            date=date_key(parsed),
            completed_habits=completed_habits,
            total_habits=total_habits,
            completion_rate=completion_rate,
        )
        await self.db.commit()
        return activity

    async def summary(self, user_id: str) -> dict:
        """Totals for the analytics view: habit count, longest streak, last 7 snapshots."""
        habits = await self.list_habits(user_id)
        return {
            "total_habits": len(habits),
            "longest_streak": max((h.streak for h in habits), default=0),
            "completed_today": sum(1 for h in habits if h.completed_today),
            "recent_activity": await self.repo.list_recent_activity(user_id, limit=7),
        }

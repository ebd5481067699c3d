"""Habit and daily activity repository."""
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func

from app.domain.common.types import generate_id
from app.domain.habits.models import Habit, DailyActivity
from app.infra.db.models.habit import HabitModel, DailyActivityModel


class HabitRepository:
    """Repository for habits and per-day activity snapshots."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_by_user(self, user_id: str) -> list[Habit]:
        result = await self.session.execute(
            select(HabitModel)
            .where(HabitModel.user_id == user_id)
            .order_by(HabitModel.created_at, HabitModel.id)
        )
        return [m.to_entity() for m in result.scalars().all()]

    async def get(self, habit_id: str) -> Optional[Habit]:
        model = await self.session.get(HabitModel, habit_id)
        return model.to_entity() if model else None

    async def create(
        self,
        user_id: str,
        name: str,
        category: Optional[str] = None,
        scheduled_time: Optional[str] = None,
        is_private: bool = False,
    ) -> Habit:
        now = datetime.utcnow()
        model = HabitModel(
            id=generate_id(),
            user_id=user_id,
            name=name,
            category=category,
            scheduled_time=scheduled_time,
            streak=0,
            completed_today=False,
            last_completed_date=None,
            is_private=is_private,
            created_at=now,
            updated_at=now,
        )
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

    async def save(self, habit: Habit) -> Habit:
        """Write back the mutable fields of a habit."""
        model = await self.session.get(HabitModel, habit.id)
        model.name = habit.name
        model.category = habit.category
        model.scheduled_time = habit.scheduled_time
        model.streak = habit.streak
        model.completed_today = habit.completed_today
        model.last_completed_date = habit.last_completed_date
        model.is_private = habit.is_private
        model.updated_at = datetime.utcnow()
        await self.session.flush()
        return model.to_entity()

    async def delete(self, habit_id: str) -> bool:
        result = await self.session.execute(delete(HabitModel).where(HabitModel.id == habit_id))
        return (result.rowcount or 0) > 0

    async def count_by_user(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(HabitModel).where(HabitModel.user_id == user_id)
        )
        return result.scalar() or 0

    # Daily activity
    async def upsert_activity(
        self,
        user_id: str,
        date: str,
        completed_habits: list[str],
        total_habits: int,
        completion_rate: float,
    ) -> DailyActivity:
        """One snapshot per (user, date): update it if present, else insert."""
        result = await self.session.execute(
            select(DailyActivityModel).where(
                DailyActivityModel.user_id == user_id,
                DailyActivityModel.date == date,
            )
        )
        model = result.scalar_one_or_none()
        if model is None:
            model = DailyActivityModel(id=generate_id(), user_id=user_id, date=date)
            self.session.add(model)
        model.completed_habits = list(completed_habits)
        model.total_habits = total_habits
        model.completion_rate = completion_rate
        await self.session.flush()
        return model.to_entity()

    async def list_recent_activity(self, user_id: str, limit: int = 7) -> list[DailyActivity]:
        """Most recent snapshots, newest date first."""
        result = await self.session.execute(
            select(DailyActivityModel)
            .where(DailyActivityModel.user_id == user_id)
            .order_by(DailyActivityModel.date.desc())
            .limit(limit)
        )
        return [m.to_entity() for m in result.scalars().all()]

"""Reminder and pomodoro repository."""
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from app.domain.common.types import generate_id
from app.domain.utility.models import Reminder, PomodoroSettings, PomodoroSession
from app.infra.db.models.utility import ReminderModel, PomodoroSettingsModel, PomodoroSessionModel


class UtilityRepository:
    """Per-user reminders, pomodoro settings and sessions."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # Reminders
    async def list_reminders(self, user_id: str) -> list[Reminder]:
        """Open reminders first, then by due time; newest first among equals."""
        result = await self.session.execute(
            select(ReminderModel)
            .where(ReminderModel.user_id == user_id)
            .order_by(
                ReminderModel.is_done.asc(),
                ReminderModel.remind_at.asc(),
                ReminderModel.created_at.desc(),
            )
        )
        return [m.to_entity() for m in result.scalars().all()]

    async def get_reminder(self, reminder_id: str, user_id: str) -> Optional[Reminder]:
        model = await self._owned_reminder(reminder_id, user_id)
        return model.to_entity() if model else None

    async def _owned_reminder(self, reminder_id: str, user_id: str) -> Optional[ReminderModel]:
        result = await self.session.execute(
            select(ReminderModel).where(ReminderModel.id == reminder_id, ReminderModel.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def create_reminder(
        self, user_id: str, title: str, note: Optional[str], remind_at: Optional[datetime]
    ) -> Reminder:
        model = ReminderModel(
            id=generate_id(),
            user_id=user_id,
            title=title,
            note=note,
            remind_at=remind_at,
            is_done=False,
            created_at=datetime.utcnow(),
        )
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

    async def update_reminder(self, reminder_id: str, user_id: str, **values) -> Optional[Reminder]:
        """Apply the provided fields; None when the reminder is not the user's."""
        model = await self._owned_reminder(reminder_id, user_id)
        if model is None:
            return None
        for key, value in values.items():
            setattr(model, key, value)
        await self.session.flush()
        return model.to_entity()

    async def delete_reminder(self, reminder_id: str, user_id: str) -> bool:
        result = await self.session.execute(
            delete(ReminderModel).where(ReminderModel.id == reminder_id, ReminderModel.user_id == user_id)
        )
        return (result.rowcount or 0) > 0

    # Pomodoro
    async def get_pomodoro_settings(self, user_id: str) -> Optional[PomodoroSettings]:
        model = await self.session.get(PomodoroSettingsModel, user_id)
        return model.to_entity() if model else None

    async def upsert_pomodoro_settings(self, user_id: str, **values) -> PomodoroSettings:
        model = await self.session.get(PomodoroSettingsModel, user_id)
        if model is None:
            defaults = PomodoroSettings(user_id=user_id)
            model = PomodoroSettingsModel(
                user_id=user_id,
                focus_minutes=defaults.focus_minutes,
                short_break_minutes=defaults.short_break_minutes,
                long_break_minutes=defaults.long_break_minutes,
                cycles_before_long=defaults.cycles_before_long,
                auto_start_breaks=defaults.auto_start_breaks,
                auto_start_focus=defaults.auto_start_focus,
            )
            self.session.add(model)
        for key, value in values.items():
            if value is not None:
                setattr(model, key, value)
        await self.session.flush()
        return model.to_entity()

    async def create_pomodoro_session(
        self,
        user_id: str,
        type: str,
        planned_minutes: int,
        started_at: Optional[datetime] = None,
        ended_at: Optional[datetime] = None,
        completed: bool = False,
    ) -> PomodoroSession:
        model = PomodoroSessionModel(
            id=generate_id(),
            user_id=user_id,
            type=type,
            planned_minutes=planned_minutes,
            started_at=started_at or datetime.utcnow(),
            ended_at=ended_at,
            completed=completed,
        )
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

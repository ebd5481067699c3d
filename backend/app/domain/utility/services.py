"""Reminder and pomodoro services."""
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.common.errors import NotFoundError, ValidationError
from app.domain.utility.models import Reminder, PomodoroSettings, PomodoroSession
from app.infra.db.repositories.utility_repo import UtilityRepository


class ReminderService:
    """Owner-scoped reminder CRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = UtilityRepository(db)

    async def list_reminders(self, user_id: str) -> list[Reminder]:
        return await self.repo.list_reminders(user_id)

    async def create_reminder(
        self, user_id: str, title: str, note: Optional[str] = None, remind_at: Optional[datetime] = None
    ) -> Reminder:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required")
        reminder = await self.repo.create_reminder(user_id, title, note, remind_at)
        await self.db.commit()
        return reminder

    async def update_reminder(self, user_id: str, reminder_id: str, **values) -> Reminder:
        if "title" in values:
            title = (values["title"] or "").strip()
            if not title:
                raise ValidationError("Title cannot be empty")
            values["title"] = title
        reminder = await self.repo.update_reminder(reminder_id, user_id, **values)
        if reminder is None:
            raise NotFoundError("Reminder", reminder_id)
        await self.db.commit()
        return reminder

    async def delete_reminder(self, user_id: str, reminder_id: str) -> None:
        if not await self.repo.delete_reminder(reminder_id, user_id):
            raise NotFoundError("Reminder", reminder_id)
        await self.db.commit()


class PomodoroService:
    """Pomodoro preferences and session log."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = UtilityRepository(db)

    async def get_settings(self, user_id: str) -> PomodoroSettings:
        return await self.repo.get_pomodoro_settings(user_id) or PomodoroSettings(user_id=user_id)

    async def update_settings(self, user_id: str, **values) -> PomodoroSettings:
        for key in ("focus_minutes", "short_break_minutes", "long_break_minutes", "cycles_before_long"):
            if values.get(key) is not None and values[key] <= 0:
                raise ValidationError(f"{key} must be positive")
        prefs = await self.repo.upsert_pomodoro_settings(user_id, **values)
        await self.db.commit()
        return prefs

    async def log_session(
        self,
        user_id: str,
        type: Optional[str],
        planned_minutes: Optional[int],
        started_at: Optional[datetime] = None,
        ended_at: Optional[datetime] = None,
        completed: bool = False,
    ) -> PomodoroSession:
        if not type or not planned_minutes:
            raise ValidationError("type and planned_minutes are required")
        session = await self.repo.create_pomodoro_session(
            user_id, type, planned_minutes, started_at, ended_at, completed
        )
        await self.db.commit()
        return session

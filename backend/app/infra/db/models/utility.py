"""Reminder and pomodoro database models."""
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, Text

from app.infra.db.base import Base
from app.domain.utility.models import (
    Reminder as ReminderEntity,
    PomodoroSettings as PomodoroSettingsEntity,
    PomodoroSession as PomodoroSessionEntity,
)


class ReminderModel(Base):
    """Reminder database model."""

    __tablename__ = "reminders"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    note = Column(Text, nullable=True)
    remind_at = Column(DateTime, nullable=True)
    is_done = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def to_entity(self) -> ReminderEntity:
        return ReminderEntity(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            note=self.note,
            remind_at=self.remind_at,
            is_done=bool(self.is_done),
            created_at=self.created_at,
        )


class PomodoroSettingsModel(Base):
    """Pomodoro settings database model."""

    __tablename__ = "pomodoro_settings"

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    focus_minutes = Column(Integer, default=25, nullable=False)
    short_break_minutes = Column(Integer, default=5, nullable=False)
    long_break_minutes = Column(Integer, default=15, nullable=False)
    cycles_before_long = Column(Integer, default=4, nullable=False)
    auto_start_breaks = Column(Boolean, default=False, nullable=False)
    auto_start_focus = Column(Boolean, default=False, nullable=False)

    def to_entity(self) -> PomodoroSettingsEntity:
        return PomodoroSettingsEntity(
            user_id=self.user_id,
            focus_minutes=self.focus_minutes,
            short_break_minutes=self.short_break_minutes,
            long_break_minutes=self.long_break_minutes,
            cycles_before_long=self.cycles_before_long,
            auto_start_breaks=bool(self.auto_start_breaks),
            auto_start_focus=bool(self.auto_start_focus),
        )


class PomodoroSessionModel(Base):
    """Pomodoro session database model."""

    __tablename__ = "pomodoro_sessions"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False)
    planned_minutes = Column(Integer, nullable=False)
    started_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    ended_at = Column(DateTime, nullable=True)
    completed = Column(Boolean, default=False, nullable=False)

    def to_entity(self) -> PomodoroSessionEntity:
        return PomodoroSessionEntity(
            id=self.id,
            user_id=self.user_id,
            type=self.type,
            planned_minutes=self.planned_minutes,
            started_at=self.started_at,
            ended_at=self.ended_at,
            completed=bool(self.completed),
        )

"""Habit and daily activity database models."""
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Float, ForeignKey, Integer, UniqueConstraint, Index

from app.infra.db.base import Base, JSONType
from app.domain.habits.models import Habit as HabitEntity, DailyActivity as DailyActivityEntity


class HabitModel(Base):
    """Habit database model."""

    __tablename__ = "habits"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    scheduled_time = Column(String, nullable=True)  # HH:MM, client local time
    streak = Column(Integer, default=0, nullable=False)
    completed_today = Column(Boolean, default=False, nullable=False)
    last_completed_date = Column(String, nullable=True)  # YYYY-MM-DD
    is_private = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_entity(self) -> HabitEntity:
        """Convert to domain entity."""
        return HabitEntity(
            id=self.id,
            user_id=self.user_id,
            name=self.name,
            category=self.category,
            scheduled_time=self.scheduled_time,
            streak=self.streak or 0,
            completed_today=bool(self.completed_today),
            last_completed_date=self.last_completed_date,
            is_private=bool(self.is_private),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class DailyActivityModel(Base):
    """Daily activity snapshot database model."""

    __tablename__ = "daily_activities"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = Column(String, nullable=False)  # YYYY-MM-DD
    completed_habits = Column(JSONType, nullable=False, default=list)  # habit ids
    total_habits = Column(Integer, default=0, nullable=False)
    completion_rate = Column(Float, default=0.0, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_activities_user_date"),
        Index("ix_daily_activities_user_date", "user_id", "date"),
    )

    def to_entity(self) -> DailyActivityEntity:
        return DailyActivityEntity(
            id=self.id,
            user_id=self.user_id,
            date=self.date,
            completed_habits=list(self.completed_habits or []),
            total_habits=self.total_habits or 0,
            completion_rate=self.completion_rate or 0.0,
        )

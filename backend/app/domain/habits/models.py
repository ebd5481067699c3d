"""Habit domain models."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Habit:
    """Habit domain model."""
    id: str
    user_id: str
    name: str
    category: Optional[str]
    scheduled_time: Optional[str]
    streak: int
    completed_today: bool
    last_completed_date: Optional[str]  # YYYY-MM-DD
    is_private: bool
    created_at: datetime
    updated_at: datetime


@dataclass
class DailyActivity:
    """Per-day completion snapshot (unique per user + date)."""
    id: str
    user_id: str
    date: str  # YYYY-MM-DD
    completed_habits: list[str] = field(default_factory=list)
    total_habits: int = 0
    completion_rate: float = 0.0

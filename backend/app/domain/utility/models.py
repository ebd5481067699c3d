"""Reminder and pomodoro domain models."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Reminder:
    """Reminder domain model."""
    id: str
    user_id: str
    title: str
    note: Optional[str]
    remind_at: Optional[datetime]
    is_done: bool
    created_at: datetime


@dataclass
class PomodoroSettings:
    """Pomodoro timer preferences (one per user)."""
    user_id: str
    focus_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    cycles_before_long: int = 4
    auto_start_breaks: bool = False
    auto_start_focus: bool = False


@dataclass
class PomodoroSession:
    """A logged focus or break session."""
    id: str
    user_id: str
    type: str  # focus | short_break | long_break
    planned_minutes: int
    started_at: datetime
    ended_at: Optional[datetime]
    completed: bool

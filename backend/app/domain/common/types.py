"""Common domain types."""
from datetime import date, timedelta
from typing import Callable
from uuid import uuid4

# Injected wherever "today" matters so tests can pin the calendar date.
Clock = Callable[[], date]


def generate_id() -> str:
    """Generate a new UUID string."""
    return str(uuid4())


def date_key(day: date) -> str:
    """Calendar-date string (YYYY-MM-DD) used for per-day records."""
    return day.isoformat()


def previous_day_key(day: date) -> str:
    return date_key(day - timedelta(days=1))

"""Streak rules for daily habits.

A streak counts consecutive calendar days with a completion and grows at most
once per day. Un-completing never lowers it; a gap of a full day resets it.
"""
from datetime import date

from app.domain.common.types import date_key, previous_day_key
from app.domain.habits.models import Habit


def is_completed_on(habit: Habit, today: date) -> bool:
    return habit.last_completed_date == date_key(today)


def current_streak(habit: Habit, today: date) -> int:
    """Streak as of today: a streak last extended before yesterday has lapsed."""
    if habit.last_completed_date in (date_key(today), previous_day_key(today)):
        return habit.streak
    return 0


def apply_completion(habit: Habit, completed: bool, today: date) -> Habit:
    """Toggle completion for today and update the streak in place."""
    if completed and not is_completed_on(habit, today):
        habit.streak = current_streak(habit, today) + 1
        habit.last_completed_date = date_key(today)
    habit.completed_today = completed
    return habit

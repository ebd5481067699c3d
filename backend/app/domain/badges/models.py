"""Badge domain models."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class BadgeType(str, Enum):
    """Metric a badge threshold is compared against."""
    HABIT_COUNT = "HABIT_COUNT"  # number of habits
    STREAK = "STREAK"  # longest current habit streak
    SOCIAL = "SOCIAL"  # accepted friends


@dataclass
class Badge:
    """Badge catalogue entry."""
    id: str
    name: str
    description: str
    icon: str
    type: BadgeType
    threshold: int


@dataclass
class UserBadge:
    """A badge unlocked by a user."""
    id: str
    user_id: str
    badge_id: str
    unlocked_at: datetime
    badge: Optional[Badge] = None


# (name, description, icon, type, threshold)
DEFAULT_BADGES = [
    ("The Starter", "Create 5 habits", "🌱", BadgeType.HABIT_COUNT, 5),
    ("On Fire", "Reach a 7 day streak", "🔥", BadgeType.STREAK, 7),
    ("Habit Master", "Create 20 habits", "🏆", BadgeType.HABIT_COUNT, 20),
    ("Unbreakable", "Reach a 30 day streak", "💎", BadgeType.STREAK, 30),
    ("Social Butterfly", "Make 5 friends", "🦋", BadgeType.SOCIAL, 5),
]

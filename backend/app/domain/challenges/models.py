"""Challenge domain models."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Challenge:
    """Challenge domain model. participants is a counter, never negative."""
    id: str
    name: str
    description: str
    duration: int  # days
    participants: int
    room_id: Optional[str]  # group forum room
    created_at: datetime


@dataclass
class ChallengeParticipant:
    """A user's enrolment in a challenge and the habit created for it."""
    id: str
    user_id: str
    challenge_id: str
    habit_id: Optional[str]
    joined_at: datetime

"""Challenge domain services: listing, creation, and atomic join/leave."""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.challenges.models import Challenge
from app.domain.common.errors import ConflictError, NotFoundError, ValidationError
from app.infra.db.repositories.challenge_repo import ChallengeRepository
from app.infra.db.repositories.chat_repo import ChatRepository
from app.infra.db.repositories.habit_repo import HabitRepository

logger = logging.getLogger(__name__)

CHALLENGE_HABIT_CATEGORY = "Challenge"


@dataclass
class ChallengeView:
    """A challenge annotated for one viewer."""
    challenge: Challenge
    joined: bool
    habit_id: Optional[str]


class ChallengeService:
    """Challenge/habit linkage. Join and leave each run as one transaction."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.challenges = ChallengeRepository(db)
        self.habits = HabitRepository(db)
        self.chats = ChatRepository(db)

    async def list_for(self, user_id: str) -> list[ChallengeView]:
        challenges = await self.challenges.list_all()
        mine = await self.challenges.participations_for(user_id)
        return [
            ChallengeView(
                challenge=c,
                joined=c.id in mine,
                habit_id=mine[c.id].habit_id if c.id in mine else None,
            )
            for c in challenges
        ]

    async def create_challenge(self, name: str, description: str, duration: int) -> Challenge:
        """Create a challenge together with its group forum room."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Challenge name is required")
        if duration <= 0:
            raise ValidationError("Duration must be positive")
        try:
            room = await self.chats.create_room([], is_group=True, name=f"{name} Forum")
            challenge = await self.challenges.create(name, description or "", duration, room_id=room.id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info("Challenge %s created with forum room %s", challenge.id, room.id)
        return challenge

    async def join(self, user_id: str, challenge_id: str) -> ChallengeView:
        """Create the habit, participant row and forum membership, and bump the counter."""
        challenge = await self.challenges.get(challenge_id)
        if challenge is None:
            raise NotFoundError("Challenge", challenge_id)
        if await self.challenges.get_participant(user_id, challenge_id):
            raise ConflictError("Already joined this challenge")

        try:
            habit = await self.habits.create(
                user_id=user_id,
                name=challenge.name,
                category=CHALLENGE_HABIT_CATEGORY,
            )
            await self.challenges.add_participant(user_id, challenge.id, habit.id)
            if challenge.room_id:
                await self.chats.add_participant(challenge.room_id, user_id)
            await self.challenges.adjust_participants(challenge.id, +1)
            await self.db.commit()
        except IntegrityError:
            # concurrent join by the same user lost the unique (user, challenge) race
            await self.db.rollback()
            raise ConflictError("Already joined this challenge")
        except Exception:
            await self.db.rollback()
            raise

        logger.info("User %s joined challenge %s (habit %s)", user_id, challenge.id, habit.id)
        refreshed = await self.challenges.refresh(challenge.id)
        return ChallengeView(challenge=refreshed, joined=True, habit_id=habit.id)

    async def leave(self, user_id: str, challenge_id: str) -> ChallengeView:
        """Undo a join: habit, participant row, forum membership, counter (floored at zero)."""
        challenge = await self.challenges.get(challenge_id)
        if challenge is None:
            raise NotFoundError("Challenge", challenge_id)
        participant = await self.challenges.get_participant(user_id, challenge_id)
        if participant is None:
            raise ValidationError("Not a participant of this challenge")

        try:
            await self.challenges.delete_participant(participant.id)
            if participant.habit_id:
                await self.habits.delete(participant.habit_id)
            if challenge.room_id:
                await self.chats.remove_participant(challenge.room_id, user_id)
            await self.challenges.adjust_participants(challenge.id, -1)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("User %s left challenge %s", user_id, challenge.id)
        refreshed = await self.challenges.refresh(challenge.id)
        return ChallengeView(challenge=refreshed, joined=False, habit_id=None)

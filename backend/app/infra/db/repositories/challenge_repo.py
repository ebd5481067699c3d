"""Challenge repository."""
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, case

from app.domain.common.types import generate_id
from app.domain.challenges.models import Challenge, ChallengeParticipant
from app.infra.db.models.challenge import ChallengeModel, ChallengeParticipantModel


class ChallengeRepository:
    """Challenge repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> list[Challenge]:
        result = await self.session.execute(
            select(ChallengeModel).order_by(ChallengeModel.created_at, ChallengeModel.id)
        )
        return [m.to_entity() for m in result.scalars().all()]

    async def get(self, challenge_id: str) -> Optional[Challenge]:
        model = await self.session.get(ChallengeModel, challenge_id)
        return model.to_entity() if model else None

    async def get_by_name(self, name: str) -> Optional[Challenge]:
        result = await self.session.execute(select(ChallengeModel).where(ChallengeModel.name == name))
        model = result.scalars().first()
        return model.to_entity() if model else None

    async def create(
        self, name: str, description: str, duration: int, room_id: Optional[str] = None
    ) -> Challenge:
        model = ChallengeModel(
            id=generate_id(),
            name=name,
            description=description,
            duration=duration,
            participants=0,
            room_id=room_id,
            created_at=datetime.utcnow(),
        )
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

    async def adjust_participants(self, challenge_id: str, delta: int) -> None:
        """Apply delta to the counter in SQL, floored at zero."""
        new_value = ChallengeModel.participants + delta
        await self.session.execute(
            update(ChallengeModel)
            .where(ChallengeModel.id == challenge_id)
            .values(participants=case((new_value < 0, 0), else_=new_value))
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()

    async def refresh(self, challenge_id: str) -> Optional[Challenge]:
        """Re-read a challenge, bypassing the identity map."""
        result = await self.session.execute(
            select(ChallengeModel)
            .where(ChallengeModel.id == challenge_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    # Participants
    async def get_participant(self, user_id: str, challenge_id: str) -> Optional[ChallengeParticipant]:
        result = await self.session.execute(
            select(ChallengeParticipantModel).where(
                ChallengeParticipantModel.user_id == user_id,
                ChallengeParticipantModel.challenge_id == challenge_id,
            )
        )
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def participations_for(self, user_id: str) -> dict[str, ChallengeParticipant]:
        """The user's participant records keyed by challenge id."""
        result = await self.session.execute(
            select(ChallengeParticipantModel).where(ChallengeParticipantModel.user_id == user_id)
        )
        return {m.challenge_id: m.to_entity() for m in result.scalars().all()}

    async def add_participant(
        self, user_id: str, challenge_id: str, habit_id: Optional[str]
    ) -> ChallengeParticipant:
        """Raises IntegrityError if (user, challenge) already exists."""
        model = ChallengeParticipantModel(
            id=generate_id(),
            user_id=user_id,
            challenge_id=challenge_id,
            habit_id=habit_id,
            joined_at=datetime.utcnow(),
        )
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

    async def delete_participant(self, participant_id: str) -> None:
        await self.session.execute(
            delete(ChallengeParticipantModel).where(ChallengeParticipantModel.id == participant_id)
        )

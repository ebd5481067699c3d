"""Challenge database models."""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Text, UniqueConstraint

from app.infra.db.base import Base
from app.domain.challenges.models import (
    Challenge as ChallengeEntity,
    ChallengeParticipant as ChallengeParticipantEntity,
)


class ChallengeModel(Base):
    """Challenge database model."""

    __tablename__ = "challenges"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    duration = Column(Integer, nullable=False)
    participants = Column(Integer, default=0, nullable=False)
    room_id = Column(String, ForeignKey("chat_rooms.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def to_entity(self) -> ChallengeEntity:
        return ChallengeEntity(
            id=self.id,
            name=self.name,
            description=self.description or "",
            duration=self.duration,
            participants=max(self.participants or 0, 0),
            room_id=self.room_id,
            created_at=self.created_at,
        )


class ChallengeParticipantModel(Base):
    """Challenge participant database model."""

    __tablename__ = "challenge_participants"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    challenge_id = Column(String, ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False, index=True)
    habit_id = Column(String, ForeignKey("habits.id", ondelete="SET NULL"), nullable=True)
    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "challenge_id", name="uq_challenge_participants_user_challenge"),
    )

    def to_entity(self) -> ChallengeParticipantEntity:
        return ChallengeParticipantEntity(
            id=self.id,
            user_id=self.user_id,
            challenge_id=self.challenge_id,
            habit_id=self.habit_id,
            joined_at=self.joined_at,
        )

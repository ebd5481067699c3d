"""Social graph database models."""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum

from app.infra.db.base import Base
from app.domain.social.models import (
    Friendship as FriendshipEntity,
    BlockedUser as BlockedUserEntity,
    FriendshipStatus,
)


class FriendshipModel(Base):
    """Friendship database model."""

    __tablename__ = "friendships"

    id = Column(String, primary_key=True)
    sender_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(SQLEnum(FriendshipStatus), nullable=False, default=FriendshipStatus.PENDING)
    # "<low id>:<high id>", closes the read-then-write race on concurrent requests for one pair
    pair_key = Column(String, nullable=False, unique=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_entity(self) -> FriendshipEntity:
        """Convert to domain entity."""
        return FriendshipEntity(
            id=self.id,
            sender_id=self.sender_id,
            receiver_id=self.receiver_id,
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class BlockedUserModel(Base):
    """Block edge database model."""

    __tablename__ = "blocked_users"

    id = Column(String, primary_key=True)
    blocker_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    blocked_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("blocker_id", "blocked_id", name="uq_blocked_users_pair"),)

    def to_entity(self) -> BlockedUserEntity:
        return BlockedUserEntity(
            id=self.id,
            blocker_id=self.blocker_id,
            blocked_id=self.blocked_id,
            created_at=self.created_at,
        )

"""Badge database models."""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, UniqueConstraint, Enum as SQLEnum

from app.infra.db.base import Base
from app.domain.badges.models import Badge as BadgeEntity, UserBadge as UserBadgeEntity, BadgeType


class BadgeModel(Base):
    """Badge catalogue database model."""

    __tablename__ = "badges"

    id = Column(String, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=False, default="")
    icon = Column(String, nullable=False, default="")
    type = Column(SQLEnum(BadgeType), nullable=False)
    threshold = Column(Integer, nullable=False)

    def to_entity(self) -> BadgeEntity:
        return BadgeEntity(
            id=self.id,
            name=self.name,
            description=self.description or "",
            icon=self.icon or "",
            type=self.type,
            threshold=self.threshold,
        )


class UserBadgeModel(Base):
    """Unlocked badge database model."""

    __tablename__ = "user_badges"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    badge_id = Column(String, ForeignKey("badges.id", ondelete="CASCADE"), nullable=False)
    unlocked_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "badge_id", name="uq_user_badges_user_badge"),)

    def to_entity(self) -> UserBadgeEntity:
        return UserBadgeEntity(
            id=self.id,
            user_id=self.user_id,
            badge_id=self.badge_id,
            unlocked_at=self.unlocked_at,
        )

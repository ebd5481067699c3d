"""Notification database model."""
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text, Index, Enum as SQLEnum

from app.infra.db.base import Base
from app.domain.notifications.models import Notification as NotificationEntity, NotificationType


class NotificationModel(Base):
    """User notification - likes, comments, friend requests, messages, achievements."""

    __tablename__ = "notifications"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(SQLEnum(NotificationType), nullable=False)
    sender_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    entity_id = Column(String, nullable=True)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (Index("ix_notifications_user_created", "user_id", "created_at"),)

    def to_entity(self) -> NotificationEntity:
        return NotificationEntity(
            id=self.id,
            user_id=self.user_id,
            type=self.type,
            sender_id=self.sender_id,
            entity_id=self.entity_id,
            content=self.content,
            is_read=bool(self.is_read),
            created_at=self.created_at,
        )

"""Notification repository."""
from datetime import datetime
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, delete

from app.domain.common.types import generate_id
from app.domain.notifications.models import Notification, NotificationType
from app.infra.db.models.notification import NotificationModel


class NotificationRepository:
    """Notification repository. Writes are flushed; the caller owns the commit."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        user_id: str,
        type: NotificationType,
        content: str,
        sender_id: Optional[str] = None,
        entity_id: Optional[str] = None,
    ) -> Notification:
        """Create a notification."""
        model = NotificationModel(
            id=generate_id(),
            user_id=user_id,
            type=type,
            sender_id=sender_id,
            entity_id=entity_id,
            content=content,
            is_read=False,
            created_at=datetime.utcnow(),
        )
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

    async def list_by_user(
        self, user_id: str, limit: int = 50, type: Optional[NotificationType] = None
    ) -> List[Notification]:
        """List notifications for a user, newest first. Optional filter by type."""
        q = (
            select(NotificationModel)
            .where(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id)
            .limit(limit)
        )
        if type is not None:
            q = q.where(NotificationModel.type == type)
        result = await self.session.execute(q)
        return [m.to_entity() for m in result.scalars().all()]

    async def count_unread(self, user_id: str) -> int:
        """Count unread notifications for a user."""
        result = await self.session.execute(
            select(func.count()).select_from(NotificationModel).where(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
        )
        return result.scalar() or 0

    async def mark_read(self, notification_id: str, user_id: str) -> bool:
        """Mark a notification as read. Returns True if found and updated."""
        result = await self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            )
            .values(is_read=True)
        )
        return result.rowcount > 0

    async def mark_all_read(self, user_id: str) -> int:
        """Mark all notifications as read for a user. Returns count updated."""
        result = await self.session.execute(
            update(NotificationModel)
            .where(NotificationModel.user_id == user_id, NotificationModel.is_read.is_(False))
            .values(is_read=True)
        )
        return result.rowcount or 0

    async def delete_for_user(self, notification_id: str, user_id: str) -> bool:
        """Delete a notification if it belongs to the user. Returns True if deleted."""
        result = await self.session.execute(
            delete(NotificationModel).where(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            )
        )
        return result.rowcount > 0

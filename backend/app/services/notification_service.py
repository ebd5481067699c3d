"""
Central notification delivery: one function for every in-app inbox entry.

Call this from any module (friends, posts, chat, badges) instead of creating
notification rows directly. Handles:
- self-notification suppression (recipient == sender never gets a row)
- DB notification (inbox, unread), flushed into the caller's transaction
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.notifications.models import Notification, NotificationType
from app.infra.db.repositories.notification_repo import NotificationRepository

logger = logging.getLogger(__name__)


async def deliver_notification(
    session: AsyncSession,
    user_id: str,
    type: NotificationType,
    sender_id: Optional[str],
    entity_id: Optional[str],
    content: str,
) -> Optional[Notification]:
    """
    Create an inbox notification for user_id unless it would notify the sender about their own action.

    Args:
        session: DB session; the row is flushed, the caller commits.
        user_id: Recipient user id.
        type: LIKE, COMMENT, FRIEND_REQUEST, MESSAGE or ACHIEVEMENT.
        sender_id: Acting user, or None for system notifications.
        entity_id: Referenced post, friendship, room or badge id.
        content: Text shown in the inbox.

    Returns:
        The created Notification, or None when suppressed.
    """
    if sender_id is not None and sender_id == user_id:
        logger.debug("Suppressed self-notification %s for user %s", type.value, user_id)
        return None
    repo = NotificationRepository(session)
    notification = await repo.create(
        user_id=user_id,
        type=type,
        content=content,
        sender_id=sender_id,
        entity_id=entity_id,
    )
    logger.info("Notification %s (%s) queued for user %s", notification.id, type.value, user_id)
    return notification

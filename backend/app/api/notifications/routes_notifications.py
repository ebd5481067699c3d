"""Notification API routes."""
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.api.schemas import UserSummaryResponse
from app.domain.accounts.models import User
from app.domain.notifications.models import NotificationType
from app.infra.db.repositories.notification_repo import NotificationRepository
from app.infra.db.repositories.user_repo import UserRepositoryImpl
from app.settings import settings

router = APIRouter()


class NotificationResponse(BaseModel):
    """Notification response."""
    id: str
    type: str
    sender_id: Optional[str] = None
    sender: Optional[UserSummaryResponse] = None
    entity_id: Optional[str] = None
    content: str
    is_read: bool
    created_at: datetime


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    limit: Optional[int] = None,
    type: Optional[NotificationType] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List notifications for the current user, newest first. Optional filter by type."""
    if limit is None or limit < 1 or limit > 100:
        limit = settings.notification_limit
    notifications = await NotificationRepository(db).list_by_user(current_user.id, limit=limit, type=type)
    senders = await UserRepositoryImpl(db).get_by_ids({n.sender_id for n in notifications if n.sender_id})
    return [
        NotificationResponse(
            id=n.id,
            type=n.type.value,
            sender_id=n.sender_id,
            sender=UserSummaryResponse.from_user(senders[n.sender_id]) if n.sender_id in senders else None,
            entity_id=n.entity_id,
            content=n.content,
            is_read=n.is_read,
            created_at=n.created_at,
        )
        for n in notifications
    ]


@router.get("/unread-count")
async def get_unread_count(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Return unread notification count for the current user."""
    count = await NotificationRepository(db).count_unread(current_user.id)
    return {"unread": count}


@router.put("/read-all")
async def mark_all_notifications_read(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Mark all notifications as read for the current user."""
    count = await NotificationRepository(db).mark_all_read(current_user.id)
    await db.commit()
    return {"ok": True, "updated": count}


@router.put("/{notification_id}/read")
async def mark_notification_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Mark a notification as read."""
    updated = await NotificationRepository(db).mark_read(notification_id, current_user.id)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    await db.commit()
    return {"ok": True}


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a notification of the current user."""
    deleted = await NotificationRepository(db).delete_for_user(notification_id, current_user.id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    await db.commit()
    return {"ok": True}

"""Reminder API routes."""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.domain.accounts.models import User
from app.domain.utility.models import Reminder
from app.domain.utility.services import ReminderService

router = APIRouter()


class ReminderCreateRequest(BaseModel):
    title: Optional[str] = None
    note: Optional[str] = None
    remind_at: Optional[datetime] = None


class ReminderUpdateRequest(BaseModel):
    """Partial reminder update; omitted fields are left unchanged."""
    title: Optional[str] = None
    note: Optional[str] = None
    remind_at: Optional[datetime] = None
    is_done: Optional[bool] = None


class ReminderResponse(BaseModel):
    id: str
    title: str
    note: Optional[str] = None
    remind_at: Optional[datetime] = None
    is_done: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, reminder: Reminder) -> "ReminderResponse":
        return cls(
            id=reminder.id,
            title=reminder.title,
            note=reminder.note,
            remind_at=reminder.remind_at,
            is_done=reminder.is_done,
            created_at=reminder.created_at,
        )


@router.get("", response_model=list[ReminderResponse])
async def list_reminders(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Open reminders first, soonest first."""
    reminders = await ReminderService(db).list_reminders(current_user.id)
    return [ReminderResponse.from_entity(r) for r in reminders]


@router.post("", response_model=ReminderResponse)
async def create_reminder(
    request: ReminderCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    reminder = await ReminderService(db).create_reminder(
        current_user.id, request.title or "", note=request.note, remind_at=request.remind_at
    )
    return ReminderResponse.from_entity(reminder)


@router.put("/{reminder_id}", response_model=ReminderResponse)
async def update_reminder(
    reminder_id: str,
    request: ReminderUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    reminder = await ReminderService(db).update_reminder(
        current_user.id, reminder_id, **request.model_dump(exclude_unset=True)
    )
    return ReminderResponse.from_entity(reminder)


@router.delete("/{reminder_id}")
async def delete_reminder(
    reminder_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await ReminderService(db).delete_reminder(current_user.id, reminder_id)
    return {"ok": True}

"""Habit API routes."""
from datetime import date as date_type, datetime
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.domain.accounts.models import User
from app.domain.habits.models import Habit, DailyActivity
from app.domain.habits.services import HabitService

router = APIRouter()


class HabitCreateRequest(BaseModel):
    """Create habit request."""
    name: Optional[str] = None
    category: Optional[str] = None
    scheduled_time: Optional[str] = None  # HH:MM
    is_private: bool = False


class HabitUpdateRequest(BaseModel):
    """Partial habit update. date is the client's calendar day for completion toggles."""
    name: Optional[str] = None
    category: Optional[str] = None
    scheduled_time: Optional[str] = None
    is_private: Optional[bool] = None
    completed_today: Optional[bool] = None
    date: Optional[date_type] = None


class HabitResponse(BaseModel):
    """Habit response."""
    id: str
    name: str
    category: Optional[str] = None
    scheduled_time: Optional[str] = None
    streak: int
    completed_today: bool
    last_completed_date: Optional[str] = None
    is_private: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, habit: Habit) -> "HabitResponse":
        return cls(
            id=habit.id,
            name=habit.name,
            category=habit.category,
            scheduled_time=habit.scheduled_time,
            streak=habit.streak,
            completed_today=habit.completed_today,
            last_completed_date=habit.last_completed_date,
            is_private=habit.is_private,
            created_at=habit.created_at,
        )


class ActivityRequest(BaseModel):
    """Daily activity snapshot."""
    date: str  # YYYY-MM-DD
    completed_habits: list[str] = Field(default_factory=list)
    total_habits: int = 0
    completion_rate: float = 0.0


class ActivityResponse(BaseModel):
    """Daily activity snapshot response."""
    id: str
    date: str
    completed_habits: list[str]
    total_habits: int
    completion_rate: float

    @classmethod
    def from_entity(cls, activity: DailyActivity) -> "ActivityResponse":
        return cls(
            id=activity.id,
            date=activity.date,
            completed_habits=activity.completed_habits,
            total_habits=activity.total_habits,
            completion_rate=activity.completion_rate,
        )


@router.get("", response_model=list[HabitResponse])
async def list_habits(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the current user's habits."""
    habits = await HabitService(db).list_habits(current_user.id)
    return [HabitResponse.from_entity(h) for h in habits]


@router.post("", response_model=HabitResponse)
async def create_habit(
    request: HabitCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a habit."""
    habit = await HabitService(db).create_habit(
        current_user.id,
        name=request.name or "",
        category=request.category,
        scheduled_time=request.scheduled_time,
        is_private=request.is_private,
    )
    return HabitResponse.from_entity(habit)


@router.post("/activity", response_model=ActivityResponse)
async def record_activity(
    request: ActivityRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Upsert the daily activity snapshot for (user, date)."""
    activity = await HabitService(db).record_activity(
        current_user.id,
        day=request.date,
        completed_habits=request.completed_habits,
        total_habits=request.total_habits,
        completion_rate=request.completion_rate,
    )
    return ActivityResponse.from_entity(activity)


@router.put("/{habit_id}", response_model=HabitResponse)
async def update_habit(
    habit_id: str,
    request: HabitUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a habit; toggling completed_today drives the streak."""
    habit = await HabitService(db).update_habit(
        current_user.id,
        habit_id,
        name=request.name,
        category=request.category,
        scheduled_time=request.scheduled_time,
        is_private=request.is_private,
        completed_today=request.completed_today,
        today=request.date,
    )
    return HabitResponse.from_entity(habit)


@router.delete("/{habit_id}")
async def delete_habit(
    habit_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a habit."""
    await HabitService(db).delete_habit(current_user.id, habit_id)
    return {"ok": True}

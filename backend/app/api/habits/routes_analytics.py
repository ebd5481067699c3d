"""Analytics API routes."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.api.habits.routes_habits import ActivityResponse
from app.domain.accounts.models import User
from app.domain.habits.services import HabitService

router = APIRouter()


class SummaryResponse(BaseModel):
    """Analytics summary."""
    total_habits: int
    longest_streak: int
    completed_today: int
    recent_activity: list[ActivityResponse]


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Habit totals and the last 7 daily snapshots."""
    summary = await HabitService(db).summary(current_user.id)
    return SummaryResponse(
        total_habits=summary["total_habits"],
        longest_streak=summary["longest_streak"],
        completed_today=summary["completed_today"],
        recent_activity=[ActivityResponse.from_entity(a) for a in summary["recent_activity"]],
    )

"""Pomodoro API routes."""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.domain.accounts.models import User
from app.domain.utility.models import PomodoroSettings, PomodoroSession
from app.domain.utility.services import PomodoroService

router = APIRouter()


class PomodoroSettingsRequest(BaseModel):
    focus_minutes: Optional[int] = None
    short_break_minutes: Optional[int] = None
    long_break_minutes: Optional[int] = None
    cycles_before_long: Optional[int] = None
    auto_start_breaks: Optional[bool] = None
    auto_start_focus: Optional[bool] = None


class PomodoroSettingsResponse(BaseModel):
    focus_minutes: int
    short_break_minutes: int
    long_break_minutes: int
    cycles_before_long: int
    auto_start_breaks: bool
    auto_start_focus: bool

    @classmethod
    def from_entity(cls, prefs: PomodoroSettings) -> "PomodoroSettingsResponse":
        return cls(
            focus_minutes=prefs.focus_minutes,
            short_break_minutes=prefs.short_break_minutes,
            long_break_minutes=prefs.long_break_minutes,
            cycles_before_long=prefs.cycles_before_long,
            auto_start_breaks=prefs.auto_start_breaks,
            auto_start_focus=prefs.auto_start_focus,
        )


class SessionCreateRequest(BaseModel):
    """Finished (or abandoned) timer session."""
    type: Optional[str] = None
    planned_minutes: Optional[int] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    completed: bool = False


class SessionResponse(BaseModel):
    id: str
    type: str
    planned_minutes: int
    started_at: datetime
    ended_at: Optional[datetime] = None
    completed: bool

    @classmethod
    def from_entity(cls, session: PomodoroSession) -> "SessionResponse":
        return cls(
            id=session.id,
            type=session.type,
            planned_minutes=session.planned_minutes,
            started_at=session.started_at,
            ended_at=session.ended_at,
            completed=session.completed,
        )


@router.get("/settings", response_model=PomodoroSettingsResponse)
async def get_pomodoro_settings(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Timer preferences (defaults when none stored)."""
    prefs = await PomodoroService(db).get_settings(current_user.id)
    return PomodoroSettingsResponse.from_entity(prefs)


@router.put("/settings", response_model=PomodoroSettingsResponse)
async def update_pomodoro_settings(
    request: PomodoroSettingsRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Upsert timer preferences."""
    prefs = await PomodoroService(db).update_settings(current_user.id, **request.model_dump())
    return PomodoroSettingsResponse.from_entity(prefs)


@router.post("/sessions", response_model=SessionResponse)
async def log_session(
    request: SessionCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Log a timer session."""
    session = await PomodoroService(db).log_session(
        current_user.id,
        type=request.type,
        planned_minutes=request.planned_minutes,
        started_at=request.started_at,
        ended_at=request.ended_at,
        completed=request.completed,
    )
    return SessionResponse.from_entity(session)

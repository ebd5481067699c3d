"""Challenge API routes."""
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.domain.accounts.models import User
from app.domain.challenges.services import ChallengeService, ChallengeView

router = APIRouter()


class ChallengeResponse(BaseModel):
    """Challenge as seen by the current user."""
    id: str
    name: str
    description: str
    duration: int
    participants: int
    room_id: Optional[str] = None
    joined: bool
    habit_id: Optional[str] = None

    @classmethod
    def from_view(cls, view: ChallengeView) -> "ChallengeResponse":
        c = view.challenge
        return cls(
            id=c.id,
            name=c.name,
            description=c.description,
            duration=c.duration,
            participants=c.participants,
            room_id=c.room_id,
            joined=view.joined,
            habit_id=view.habit_id,
        )


@router.get("", response_model=list[ChallengeResponse])
async def list_challenges(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """All challenges with the current user's participation."""
    views = await ChallengeService(db).list_for(current_user.id)
    return [ChallengeResponse.from_view(v) for v in views]


@router.post("/{challenge_id}/join", response_model=ChallengeResponse)
async def join_challenge(
    challenge_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Join a challenge: creates its habit and forum membership."""
    view = await ChallengeService(db).join(current_user.id, challenge_id)
    return ChallengeResponse.from_view(view)


@router.post("/{challenge_id}/leave", response_model=ChallengeResponse)
async def leave_challenge(
    challenge_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Leave a challenge: removes its habit and forum membership."""
    view = await ChallengeService(db).leave(current_user.id, challenge_id)
    return ChallengeResponse.from_view(view)

"""Badge catalogue routes."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.domain.accounts.models import User
from app.domain.badges.services import BadgeService

router = APIRouter()


class BadgeResponse(BaseModel):
    """Catalogue entry with the viewer's unlock state."""
    id: str
    name: str
    description: str
    icon: str
    type: str
    threshold: int
    unlocked: bool


@router.get("", response_model=list[BadgeResponse])
async def list_badges(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """All badges, flagged with whether the current user has unlocked them."""
    catalogue = await BadgeService(db).catalogue_for(current_user.id)
    return [
        BadgeResponse(
            id=badge.id,
            name=badge.name,
            description=badge.description,
            icon=badge.icon,
            type=badge.type.value,
            threshold=badge.threshold,
            unlocked=unlocked,
        )
        for badge, unlocked in catalogue
    ]

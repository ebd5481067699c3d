"""Profile API routes: own profile, other profiles, edits and avatar upload."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.api.schemas import UserResponse
from app.domain.accounts.models import User
from app.domain.accounts.services import ProfileService
from app.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


class ProfileUpdateRequest(BaseModel):
    """Partial profile update."""
    name: Optional[str] = None
    bio: Optional[str] = None
    username: Optional[str] = None


class AvatarResponse(BaseModel):
    """Avatar upload result."""
    avatar_url: str


@router.get("")
async def get_own_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """The current user's full profile with counts, streak and badges."""
    return await ProfileService(db).own_profile(current_user)


@router.put("", response_model=UserResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update name, bio or username."""
    user = await ProfileService(db).update_profile(
        current_user, name=request.name, bio=request.bio, username=request.username
    )
    return UserResponse.from_user(user)


@router.post("/avatar", response_model=AvatarResponse)
async def upload_avatar(
    avatar: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Upload a PNG/JPEG avatar, replacing the previous one."""
    # one byte past the limit is enough for the size check to refuse it
    content = await avatar.read(settings.avatar_max_bytes + 1)
    logger.info(f"🖼️ [PROFILE] Avatar upload from {current_user.id}: {avatar.filename} ({len(content)} bytes)")
    avatar_url = await ProfileService(db).set_avatar(
        current_user, avatar.filename, avatar.content_type, content
    )
    return AvatarResponse(avatar_url=avatar_url)


@router.delete("/avatar")
async def delete_avatar(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Remove the avatar file and reference."""
    await ProfileService(db).remove_avatar(current_user)
    return {"ok": True}


@router.get("/{user_id}")
async def get_profile(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Privacy-aware profile of another user."""
    return await ProfileService(db).view_profile(current_user, user_id)

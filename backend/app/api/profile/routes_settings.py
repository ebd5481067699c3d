"""Account settings API routes."""
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.api.schemas import UserResponse
from app.domain.accounts.models import User, UserSettings, ProfileVisibility
from app.domain.accounts.services import SettingsService

router = APIRouter()


class PreferencesRequest(BaseModel):
    """Notification and display preferences (partial)."""
    email_notifications: Optional[bool] = None
    habit_reminders: Optional[bool] = None
    weekly_reports: Optional[bool] = None


class AccountUpdateRequest(BaseModel):
    """Name/email change."""
    name: Optional[str] = None
    email: Optional[EmailStr] = None


class PasswordChangeRequest(BaseModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class PrivacyRequest(BaseModel):
    """Profile visibility and what friends can see."""
    profile_visibility: Optional[ProfileVisibility] = None
    show_streak: Optional[bool] = None
    show_activity: Optional[bool] = None


class PreferencesResponse(BaseModel):
    email_notifications: bool
    habit_reminders: bool
    weekly_reports: bool
    show_streak: bool
    show_activity: bool

    @classmethod
    def from_entity(cls, prefs: UserSettings) -> "PreferencesResponse":
        return cls(**prefs.model_dump(exclude={"user_id"}))


class SettingsResponse(BaseModel):
    """User account plus stored preferences."""
    user: UserResponse
    settings: PreferencesResponse


@router.get("", response_model=SettingsResponse)
async def get_settings(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Current account and preferences (defaults when none stored)."""
    prefs = await SettingsService(db).get_settings(current_user)
    return SettingsResponse(user=UserResponse.from_user(current_user), settings=PreferencesResponse.from_entity(prefs))


@router.put("", response_model=PreferencesResponse)
async def update_preferences(
    request: PreferencesRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update notification/display preferences."""
    prefs = await SettingsService(db).update_preferences(current_user, **request.model_dump())
    return PreferencesResponse.from_entity(prefs)


@router.put("/profile", response_model=UserResponse)
async def update_account(
    request: AccountUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Change name or email."""
    user = await SettingsService(db).update_account(current_user, name=request.name, email=request.email)
    return UserResponse.from_user(user)


@router.put("/password")
async def change_password(
    request: PasswordChangeRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Change password after verifying the current one."""
    await SettingsService(db).change_password(
        current_user, request.current_password or "", request.new_password or ""
    )
    return {"ok": True}


@router.put("/privacy", response_model=SettingsResponse)
async def update_privacy(
    request: PrivacyRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update profile visibility and streak/activity sharing."""
    user, prefs = await SettingsService(db).update_privacy(
        current_user,
        profile_visibility=request.profile_visibility,
        show_streak=request.show_streak,
        show_activity=request.show_activity,
    )
    return SettingsResponse(user=UserResponse.from_user(user), settings=PreferencesResponse.from_entity(prefs))

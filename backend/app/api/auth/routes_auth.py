"""Authentication routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user
from app.api.schemas import UserResponse
from app.domain.accounts.models import User
from app.domain.accounts.services import AuthService
from app.infra.security.jwt import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter()


class SignupRequest(BaseModel):
    """Signup request model. Missing fields are reported as 400 by the service."""
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    name: Optional[str] = None
    username: Optional[str] = None


class LoginRequest(BaseModel):
    """Login request model."""
    email: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(BaseModel):
    """Token plus the authenticated user."""
    token: str
    user: UserResponse


@router.post("/signup", response_model=AuthResponse)
async def signup(
    request: SignupRequest,
    db: AsyncSession = Depends(get_db),
):
    """Sign up a new user."""
    logger.info(f"🔵 [SERVER] Signup request received for email: {request.email}")
    user = await AuthService(db).signup(
        email=request.email or "",
        password=request.password or "",
        name=request.name or "",
        username=request.username,
    )
    logger.info(f"✅ [SERVER] Signup successful for user: {user.id}")
    return AuthResponse(token=create_access_token(user.id, user.email), user=UserResponse.from_user(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Login user."""
    user = await AuthService(db).login(request.email or "", request.password or "")
    logger.info(f"✅ [SERVER] Login successful for user: {user.id}")
    return AuthResponse(token=create_access_token(user.id, user.email), user=UserResponse.from_user(user))


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user."""
    return UserResponse.from_user(current_user)

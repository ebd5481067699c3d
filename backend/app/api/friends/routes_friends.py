"""Friends API routes: search, requests, friend list, blocking, profiles."""
from datetime import datetime
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.api.schemas import UserSummaryResponse
from app.domain.accounts.models import User
from app.domain.accounts.services import ProfileService
from app.domain.social.models import Friendship, FriendRequestAction
from app.domain.social.services import FriendService

router = APIRouter()


class FriendRequestCreate(BaseModel):
    """Send a friend request by username."""
    username: str


class FriendRequestRespond(BaseModel):
    """Accept or reject a pending request."""
    request_id: str
    action: FriendRequestAction


class BlockRequest(BaseModel):
    """Block or unblock a user."""
    user_id: str


class FriendshipResponse(BaseModel):
    """Friendship record."""
    id: str
    sender_id: str
    receiver_id: str
    status: str
    created_at: datetime

    @classmethod
    def from_entity(cls, friendship: Friendship) -> "FriendshipResponse":
        return cls(
            id=friendship.id,
            sender_id=friendship.sender_id,
            receiver_id=friendship.receiver_id,
            status=friendship.status.value,
            created_at=friendship.created_at,
        )


class IncomingRequestResponse(FriendshipResponse):
    """Pending request with the sender's identity."""
    sender: UserSummaryResponse


class BlockedUserResponse(UserSummaryResponse):
    """A user the viewer has blocked."""
    blocked_at: datetime


@router.get("/search", response_model=list[UserSummaryResponse])
async def search_users(
    username: str = Query("", description="Username substring"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Search users by username (excludes self and blocked users)."""
    users = await FriendService(db).search(current_user, username)
    return [UserSummaryResponse.from_user(u) for u in users]


@router.post("/request", response_model=FriendshipResponse)
async def send_friend_request(
    request: FriendRequestCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Send a friend request."""
    friendship = await FriendService(db).send_request(current_user, request.username)
    return FriendshipResponse.from_entity(friendship)


@router.get("/requests", response_model=list[IncomingRequestResponse])
async def list_friend_requests(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Incoming pending friend requests."""
    pending = await FriendService(db).list_requests(current_user)
    return [
        IncomingRequestResponse(
            **FriendshipResponse.from_entity(friendship).model_dump(),
            sender=UserSummaryResponse.from_user(sender),
        )
        for friendship, sender in pending
    ]


@router.put("/respond", response_model=FriendshipResponse)
async def respond_to_request(
    request: FriendRequestRespond,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Accept or reject a friend request addressed to the current user."""
    friendship = await FriendService(db).respond(current_user, request.request_id, request.action)
    return FriendshipResponse.from_entity(friendship)


@router.get("/list", response_model=list[UserSummaryResponse])
async def list_friends(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Accepted friends."""
    friends = await FriendService(db).list_friends(current_user)
    return [UserSummaryResponse.from_user(u) for u in friends]


@router.post("/block")
async def block_user(
    request: BlockRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Block a user (idempotent)."""
    await FriendService(db).block(current_user, request.user_id)
    return {"ok": True}


@router.post("/unblock")
async def unblock_user(
    request: BlockRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Remove the current user's block on a user."""
    removed = await FriendService(db).unblock(current_user, request.user_id)
    return {"ok": True, "removed": removed}


@router.get("/blocked", response_model=list[BlockedUserResponse])
async def list_blocked(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Users the current user has blocked."""
    blocked = await FriendService(db).list_blocked(current_user)
    return [
        BlockedUserResponse(**user.summary(), blocked_at=block.created_at)
        for block, user in blocked
    ]


@router.get("/{user_id}")
async def get_friend_profile(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Privacy-aware profile of another user."""
    return await ProfileService(db).view_profile(current_user, user_id)

"""Chat API routes: direct rooms, room list, message history and sending."""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.api.schemas import UserSummaryResponse
from app.domain.accounts.models import User
from app.domain.chat.models import ChatRoom, Message
from app.domain.chat.services import ChatService, MessageView

router = APIRouter()


class RoomCreateRequest(BaseModel):
    """Open (or reuse) a direct room with another user."""
    target_user_id: str


class MessageCreateRequest(BaseModel):
    """Send a message, optionally replying to another message of the room."""
    content: Optional[str] = None
    reply_to_id: Optional[str] = None


class MessagePreview(BaseModel):
    """Short message form used for room previews and reply targets."""
    id: str
    sender_id: str
    content: str
    created_at: datetime

    @classmethod
    def from_entity(cls, message: Message) -> "MessagePreview":
        return cls(
            id=message.id,
            sender_id=message.sender_id,
            content=message.content,
            created_at=message.created_at,
        )


class ReplyToResponse(MessagePreview):
    """Reply target with its sender."""
    sender: Optional[UserSummaryResponse] = None


class MessageResponse(BaseModel):
    """Chat message response."""
    id: str
    room_id: str
    sender_id: str
    sender: Optional[UserSummaryResponse] = None
    content: str
    reply_to_id: Optional[str] = None
    reply_to: Optional[ReplyToResponse] = None
    created_at: datetime

    @classmethod
    def from_view(cls, view: MessageView) -> "MessageResponse":
        message = view.message
        reply_to = None
        if view.reply_to is not None:
            reply_to = ReplyToResponse(
                **MessagePreview.from_entity(view.reply_to).model_dump(),
                sender=UserSummaryResponse.from_user(view.reply_to_sender) if view.reply_to_sender else None,
            )
        return cls(
            id=message.id,
            room_id=message.room_id,
            sender_id=message.sender_id,
            sender=UserSummaryResponse.from_user(view.sender) if view.sender else None,
            content=message.content,
            reply_to_id=message.reply_to_id,
            reply_to=reply_to,
            created_at=message.created_at,
        )


class RoomResponse(BaseModel):
    """Chat room response."""
    id: str
    is_group: bool
    name: Optional[str] = None
    updated_at: datetime
    participants: list[UserSummaryResponse] = []
    last_message: Optional[MessagePreview] = None


def _room_response(room: ChatRoom, participants: list[User], last: Optional[Message] = None) -> RoomResponse:
    return RoomResponse(
        id=room.id,
        is_group=room.is_group,
        name=room.name,
        updated_at=room.updated_at,
        participants=[UserSummaryResponse.from_user(u) for u in participants],
        last_message=MessagePreview.from_entity(last) if last else None,
    )


@router.get("/rooms", response_model=list[RoomResponse])
async def list_rooms(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Rooms of the current user, most recent activity first."""
    views = await ChatService(db).list_rooms(current_user)
    return [_room_response(v.room, v.participants, v.last_message) for v in views]


@router.post("/rooms", response_model=RoomResponse)
async def get_or_create_room(
    request: RoomCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Return the direct room with target_user_id, creating it if needed."""
    service = ChatService(db)
    room = await service.get_or_create_direct_room(current_user, request.target_user_id)
    participants = await service.users.get_by_ids(set(room.participant_ids))
    return _room_response(room, [participants[uid] for uid in room.participant_ids if uid in participants])


@router.get("/rooms/{room_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    room_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Recent messages of a room, oldest first."""
    views = await ChatService(db).list_messages(current_user, room_id)
    return [MessageResponse.from_view(v) for v in views]


@router.post("/rooms/{room_id}/messages", response_model=MessageResponse)
async def send_message(
    room_id: str,
    request: MessageCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Send a message to a room."""
    view = await ChatService(db).send_message(
        current_user, room_id, request.content or "", request.reply_to_id
    )
    return MessageResponse.from_view(view)

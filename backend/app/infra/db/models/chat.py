"""Chat room database models."""
from datetime import datetime
from typing import Optional
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text, Index, UniqueConstraint

from app.infra.db.base import Base
from app.domain.chat.models import ChatRoom as ChatRoomEntity, Message as MessageEntity


class ChatRoomModel(Base):
    """Chat room (direct or group)."""

    __tablename__ = "chat_rooms"

    id = Column(String, primary_key=True)
    is_group = Column(Boolean, default=False, nullable=False)
    name = Column(String, nullable=True)  # required for group rooms
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)  # bumped on every message

    def to_entity(self, participant_ids: Optional[list[str]] = None) -> ChatRoomEntity:
        return ChatRoomEntity(
            id=self.id,
            is_group=bool(self.is_group),
            name=self.name,
            created_at=self.created_at,
            updated_at=self.updated_at,
            participant_ids=list(participant_ids or []),
        )


class ChatParticipantModel(Base):
    """Room membership."""

    __tablename__ = "chat_participants"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id = Column(String, ForeignKey("chat_rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "room_id", name="uq_chat_participants_user_room"),)


class MessageModel(Base):
    """Chat message."""

    __tablename__ = "messages"

    id = Column(String, primary_key=True)
    room_id = Column(String, ForeignKey("chat_rooms.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    reply_to_id = Column(String, ForeignKey("messages.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (Index("ix_messages_room_created", "room_id", "created_at"),)

    def to_entity(self) -> MessageEntity:
        return MessageEntity(
            id=self.id,
            room_id=self.room_id,
            sender_id=self.sender_id,
            content=self.content,
            reply_to_id=self.reply_to_id,
            created_at=self.created_at,
        )

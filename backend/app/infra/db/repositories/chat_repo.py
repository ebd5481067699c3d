"""Chat room repository: rooms, participants, messages."""
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func

from app.domain.common.types import generate_id
from app.domain.chat.models import ChatRoom, Message
from app.infra.db.models.chat import ChatRoomModel, ChatParticipantModel, MessageModel


class ChatRepository:
    """Chat repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _participant_ids(self, room_ids: list[str]) -> dict[str, list[str]]:
        if not room_ids:
            return {}
        result = await self.session.execute(
            select(ChatParticipantModel.room_id, ChatParticipantModel.user_id)
            .where(ChatParticipantModel.room_id.in_(room_ids))
            .order_by(ChatParticipantModel.joined_at, ChatParticipantModel.id)
        )
        grouped: dict[str, list[str]] = {}
        for room_id, user_id in result.all():
            grouped.setdefault(room_id, []).append(user_id)
        return grouped

    async def get_room(self, room_id: str) -> Optional[ChatRoom]:
        model = await self.session.get(ChatRoomModel, room_id)
        if model is None:
            return None
        participants = await self._participant_ids([room_id])
        return model.to_entity(participants.get(room_id, []))

    async def find_direct_room(self, user_a: str, user_b: str) -> Optional[ChatRoom]:
        """Non-group room whose participant set is exactly {user_a, user_b}."""
        rooms_of_a = select(ChatParticipantModel.room_id).where(ChatParticipantModel.user_id == user_a)
        rooms_of_b = select(ChatParticipantModel.room_id).where(ChatParticipantModel.user_id == user_b)
        result = await self.session.execute(
            select(ChatRoomModel.id)
            .join(ChatParticipantModel, ChatParticipantModel.room_id == ChatRoomModel.id)
            .where(
                ChatRoomModel.is_group.is_(False),
                ChatRoomModel.id.in_(rooms_of_a),
                ChatRoomModel.id.in_(rooms_of_b),
            )
            .group_by(ChatRoomModel.id)
            .having(func.count(ChatParticipantModel.id) == 2)
            .order_by(ChatRoomModel.id)
            .limit(1)
        )
        room_id = result.scalar_one_or_none()
        return await self.get_room(room_id) if room_id else None

    async def create_room(
        self, participant_ids: list[str], is_group: bool = False, name: Optional[str] = None
    ) -> ChatRoom:
        """Create a room together with its participant rows."""
        now = datetime.utcnow()
        room = ChatRoomModel(id=generate_id(), is_group=is_group, name=name, created_at=now, updated_at=now)
        self.session.add(room)
        await self.session.flush()
        for user_id in participant_ids:
            self.session.add(
                ChatParticipantModel(id=generate_id(), user_id=user_id, room_id=room.id, joined_at=now)
            )
        await self.session.flush()
        return room.to_entity(list(participant_ids))

    async def list_rooms_for(self, user_id: str) -> list[ChatRoom]:
        """Rooms user_id participates in, most recent activity first."""
        result = await self.session.execute(
            select(ChatRoomModel)
            .join(ChatParticipantModel, ChatParticipantModel.room_id == ChatRoomModel.id)
            .where(ChatParticipantModel.user_id == user_id)
            .order_by(ChatRoomModel.updated_at.desc(), ChatRoomModel.id)
        )
        models = list(result.scalars().all())
        participants = await self._participant_ids([m.id for m in models])
        return [m.to_entity(participants.get(m.id, [])) for m in models]

    async def is_participant(self, room_id: str, user_id: str) -> bool:
        result = await self.session.execute(
            select(ChatParticipantModel.id).where(
                ChatParticipantModel.room_id == room_id,
                ChatParticipantModel.user_id == user_id,
            )
        )
        return result.first() is not None

    async def add_participant(self, room_id: str, user_id: str) -> None:
        """Add membership unless already present."""
        if await self.is_participant(room_id, user_id):
            return
        self.session.add(
            ChatParticipantModel(
                id=generate_id(), user_id=user_id, room_id=room_id, joined_at=datetime.utcnow()
            )
        )
        await self.session.flush()

    async def remove_participant(self, room_id: str, user_id: str) -> None:
        await self.session.execute(
            delete(ChatParticipantModel).where(
                ChatParticipantModel.room_id == room_id,
                ChatParticipantModel.user_id == user_id,
            )
        )

    # Messages
    async def get_message(self, message_id: str) -> Optional[Message]:
        model = await self.session.get(MessageModel, message_id)
        return model.to_entity() if model else None

    async def get_messages(self, message_ids: set[str]) -> dict[str, Message]:
        if not message_ids:
            return {}
        result = await self.session.execute(select(MessageModel).where(MessageModel.id.in_(list(message_ids))))
        return {m.id: m.to_entity() for m in result.scalars().all()}

    async def list_recent_messages(self, room_id: str, limit: int = 50) -> list[Message]:
        """The latest `limit` messages of a room, returned oldest first."""
        result = await self.session.execute(
            select(MessageModel)
            .where(MessageModel.room_id == room_id)
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .limit(limit)
        )
        return [m.to_entity() for m in reversed(result.scalars().all())]

    async def last_messages(self, room_ids: list[str]) -> dict[str, Message]:
        """Most recent message per room."""
        if not room_ids:
            return {}
        latest = (
            select(MessageModel.room_id, func.max(MessageModel.created_at).label("created_at"))
            .where(MessageModel.room_id.in_(room_ids))
            .group_by(MessageModel.room_id)
            .subquery()
        )
        result = await self.session.execute(
            select(MessageModel).join(
                latest,
                (MessageModel.room_id == latest.c.room_id) & (MessageModel.created_at == latest.c.created_at),
            )
        )
        return {m.room_id: m.to_entity() for m in result.scalars().all()}

    async def add_message(
        self, room_id: str, sender_id: str, content: str, reply_to_id: Optional[str] = None
    ) -> Message:
        """Insert a message and bump the room's updated_at in the same unit of work."""
        now = datetime.utcnow()
        model = MessageModel(
            id=generate_id(),
            room_id=room_id,
            sender_id=sender_id,
            content=content,
            reply_to_id=reply_to_id,
            created_at=now,
        )
        self.session.add(model)
        await self.session.execute(
            update(ChatRoomModel).where(ChatRoomModel.id == room_id).values(updated_at=now)
        )
        await self.session.flush()
        return model.to_entity()

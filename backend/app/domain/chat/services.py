"""Chat domain services: direct room resolution, room lists and messaging."""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.accounts.models import User
from app.domain.chat.models import ChatRoom, Message
from app.domain.common.errors import AuthorizationError, NotFoundError, ValidationError
from app.domain.notifications.models import NotificationType
from app.domain.social.policies import VisibilityPolicy
from app.infra.db.repositories.chat_repo import ChatRepository
from app.infra.db.repositories.social_repo import SocialGraphRepositoryImpl
from app.infra.db.repositories.user_repo import UserRepositoryImpl
from app.services.notification_service import deliver_notification
from app.settings import settings

logger = logging.getLogger(__name__)


@dataclass
class RoomView:
    """A room as listed for one viewer."""
    room: ChatRoom
    participants: list[User]
    last_message: Optional[Message] = None


@dataclass
class MessageView:
    """A message with its sender and, for replies, the message replied to."""
    message: Message
    sender: Optional[User]
    reply_to: Optional[Message] = None
    reply_to_sender: Optional[User] = None


class ChatService:
    """Chat room resolver and message operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.chats = ChatRepository(db)
        self.users = UserRepositoryImpl(db)
        self.policy = VisibilityPolicy(SocialGraphRepositoryImpl(db))

    async def get_or_create_direct_room(self, viewer: User, target_user_id: str) -> ChatRoom:
        """Return the 1:1 room between viewer and target, creating it on first use."""
        if target_user_id == viewer.id:
            raise ValidationError("Cannot start a chat with yourself")
        target = await self.users.get_by_id(target_user_id)
        if target is None:
            raise NotFoundError("User", target_user_id)
        if not await self.policy.can_interact_in_chat(viewer.id, target.id):
            logger.warning("Direct room %s <-> %s refused: block between users", viewer.id, target.id)
            raise AuthorizationError("Cannot chat with this user")

        room = await self.chats.find_direct_room(viewer.id, target.id)
        if room is not None:
            return room
        try:
            room = await self.chats.create_room([viewer.id, target.id], is_group=False)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info("Direct room %s created for %s and %s", room.id, viewer.id, target.id)
        return room

    async def list_rooms(self, viewer: User) -> list[RoomView]:
        """Viewer's rooms by recent activity, minus direct rooms with block-related users."""
        rooms = await self.chats.list_rooms_for(viewer.id)
        rooms = await self.policy.filter_blocked_from_room_list(viewer.id, rooms)
        last = await self.chats.last_messages([r.id for r in rooms])
        users = await self.users.get_by_ids({uid for r in rooms for uid in r.participant_ids})
        return [
            RoomView(
                room=room,
                participants=[users[uid] for uid in room.participant_ids if uid in users],
                last_message=last.get(room.id),
            )
            for room in rooms
        ]

    async def _accessible_room(self, viewer: User, room_id: str) -> ChatRoom:
        room = await self.chats.get_room(room_id)
        if room is None:
            raise NotFoundError("Chat room", room_id)
        if viewer.id not in room.participant_ids:
            raise AuthorizationError("Not a participant of this room")
        if not await self.policy.can_interact_in_room(viewer.id, room):
            raise AuthorizationError("Cannot chat with this user")
        return room

    async def _views(self, messages: list[Message]) -> list[MessageView]:
        reply_ids = {m.reply_to_id for m in messages if m.reply_to_id}
        known = {m.id: m for m in messages}
        replies = {rid: known[rid] for rid in reply_ids if rid in known}
        replies.update(await self.chats.get_messages(reply_ids - set(replies)))
        sender_ids = {m.sender_id for m in messages} | {r.sender_id for r in replies.values()}
        senders = await self.users.get_by_ids(sender_ids)
        views = []
        for message in messages:
            reply_to = replies.get(message.reply_to_id) if message.reply_to_id else None
            views.append(
                MessageView(
                    message=message,
                    sender=senders.get(message.sender_id),
                    reply_to=reply_to,
                    reply_to_sender=senders.get(reply_to.sender_id) if reply_to else None,
                )
            )
        return views

    async def list_messages(self, viewer: User, room_id: str) -> list[MessageView]:
        """The most recent messages of the room, oldest first."""
        room = await self._accessible_room(viewer, room_id)
        messages = await self.chats.list_recent_messages(room.id, limit=settings.message_history_limit)
        return await self._views(messages)

    async def send_message(
        self, viewer: User, room_id: str, content: str, reply_to_id: Optional[str] = None
    ) -> MessageView:
        content = (content or "").strip()
        if not content:
            raise ValidationError("Message content is required")
        room = await self._accessible_room(viewer, room_id)
        if reply_to_id:
            reply_to = await self.chats.get_message(reply_to_id)
            if reply_to is None or reply_to.room_id != room.id:
                raise ValidationError("Reply target is not a message of this room")

        try:
            message = await self.chats.add_message(room.id, viewer.id, content, reply_to_id or None)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self._notify_participants(viewer, room, content)
        return (await self._views([message]))[0]

    async def _notify_participants(self, viewer: User, room: ChatRoom, content: str) -> None:
        """MESSAGE fan-out after the message is committed; a failure here never undoes the message."""
        preview = content if len(content) <= 80 else content[:77] + "..."
        try:
            for participant_id in room.participant_ids:
                await deliver_notification(
                    self.db,
                    participant_id,
                    NotificationType.MESSAGE,
                    viewer.id,
                    room.id,
                    f"{viewer.name}: {preview}",
                )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Message notifications for room %s failed", room.id)

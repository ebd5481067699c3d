"""Social domain services: friend requests, friend lists and blocking."""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.accounts.models import User
from app.domain.badges.models import BadgeType
from app.domain.badges.services import BadgeService
from app.domain.common.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.domain.notifications.models import NotificationType
from app.domain.social.models import Friendship, FriendshipStatus, FriendRequestAction, BlockedUser
from app.domain.social.policies import VisibilityPolicy
from app.infra.db.repositories.social_repo import SocialGraphRepositoryImpl
from app.infra.db.repositories.user_repo import UserRepositoryImpl
from app.services.notification_service import deliver_notification
from app.settings import settings

logger = logging.getLogger(__name__)


class FriendService:
    """Friendship and block operations for one request's session."""

    def __init__(self, db: AsyncSession, badges: Optional[BadgeService] = None):
        self.db = db
        self.graph = SocialGraphRepositoryImpl(db)
        self.users = UserRepositoryImpl(db)
        self.policy = VisibilityPolicy(self.graph)
        self.badges = badges or BadgeService(db)

    async def search(self, viewer: User, username: str) -> list[User]:
        """Users whose username contains the query, excluding self and block-related users."""
        query = (username or "").strip()
        if not query:
            return []
        excluded = await self.graph.blocked_ids_for(viewer.id)
        excluded.add(viewer.id)
        return await self.users.search_by_username(query, excluded, limit=settings.search_limit)

    async def send_request(self, viewer: User, username: str) -> Friendship:
        target = await self.users.get_by_username((username or "").strip())
        if target is None:
            raise NotFoundError("User", username)
        if target.id == viewer.id:
            raise ValidationError("Cannot send a friend request to yourself")
        if await self.graph.is_blocked_between(viewer.id, target.id):
            logger.warning("Friend request %s -> %s refused: block between users", viewer.id, target.id)
            raise AuthorizationError("Cannot send a friend request to this user")
        if not await self.policy.can_send_friend_request(viewer.id, target.id):
            raise ConflictError("Friend request already exists")

        try:
            existing = await self.graph.find_friendship_between(viewer.id, target.id)
            if existing is not None:
                # only a REJECTED record can remain here; reuse it for the new request
                friendship = await self.graph.reopen_friendship(existing.id, viewer.id, target.id)
            else:
                friendship = await self.graph.create_friendship(viewer.id, target.id)
            await deliver_notification(
                self.db,
                target.id,
                NotificationType.FRIEND_REQUEST,
                viewer.id,
                friendship.id,
                f"{viewer.name} sent you a friend request",
            )
            await self.db.commit()
        except IntegrityError:
            # concurrent request for the same pair won the unique pair_key
            await self.db.rollback()
            raise ConflictError("Friend request already exists")
        except Exception:
            await self.db.rollback()
            raise

        logger.info("Friend request %s sent %s -> %s", friendship.id, viewer.id, target.id)
        return friendship

    async def list_requests(self, viewer: User) -> list[tuple[Friendship, User]]:
        """Incoming PENDING requests with their senders."""
        requests = await self.graph.list_incoming_pending(viewer.id)
        senders = await self.users.get_by_ids({r.sender_id for r in requests})
        return [(r, senders[r.sender_id]) for r in requests if r.sender_id in senders]

    async def respond(self, viewer: User, request_id: str, action: FriendRequestAction) -> Friendship:
        """Accept or reject a pending request addressed to the viewer."""
        friendship = await self.graph.get_friendship(request_id)
        if (
            friendship is None
            or friendship.receiver_id != viewer.id
            or friendship.status != FriendshipStatus.PENDING
        ):
            raise NotFoundError("Friend request", request_id)

        try:
            if action == FriendRequestAction.ACCEPT:
                friendship = await self.graph.set_status(friendship.id, FriendshipStatus.ACCEPTED)
                await deliver_notification(
                    self.db,
                    friendship.sender_id,
                    NotificationType.FRIEND_REQUEST,
                    viewer.id,
                    friendship.id,
                    f"{viewer.name} accepted your friend request",
                )
                await self.badges.evaluate(friendship.sender_id, BadgeType.SOCIAL)
                await self.badges.evaluate(friendship.receiver_id, BadgeType.SOCIAL)
            else:
                friendship = await self.graph.set_status(friendship.id, FriendshipStatus.REJECTED)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("Friend request %s %s by %s", friendship.id, friendship.status.value, viewer.id)
        return friendship

    async def list_friends(self, viewer: User) -> list[User]:
        """Accepted friends, excluding users related to the viewer by a block edge."""
        friend_ids = await self.graph.list_accepted_friend_ids(viewer.id)
        friend_ids -= await self.graph.blocked_ids_for(viewer.id)
        friends = await self.users.get_by_ids(friend_ids)
        return sorted(friends.values(), key=lambda u: u.name.lower())

    async def block(self, viewer: User, user_id: str) -> BlockedUser:
        if user_id == viewer.id:
            raise ValidationError("Cannot block yourself")
        if await self.users.get_by_id(user_id) is None:
            raise NotFoundError("User", user_id)
        try:
            block = await self.graph.upsert_block(viewer.id, user_id)
            await self.db.commit()
        except IntegrityError:
            # the same edge was inserted concurrently; blocking is idempotent
            await self.db.rollback()
            block = next(b for b in await self.graph.list_blocked_by(viewer.id) if b.blocked_id == user_id)
        except Exception:
            await self.db.rollback()
            raise
        logger.info("User %s blocked %s", viewer.id, user_id)
        return block

    async def unblock(self, viewer: User, user_id: str) -> bool:
        """Remove the viewer's own block edge; the other direction is untouched."""
        removed = await self.graph.delete_block(viewer.id, user_id)
        await self.db.commit()
        if removed:
            logger.info("User %s unblocked %s", viewer.id, user_id)
        return removed

    async def list_blocked(self, viewer: User) -> list[tuple[BlockedUser, User]]:
        blocks = await self.graph.list_blocked_by(viewer.id)
        users = await self.users.get_by_ids({b.blocked_id for b in blocks})
        return [(b, users[b.blocked_id]) for b in blocks if b.blocked_id in users]

"""Social graph repository implementation (friendships and blocks)."""
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, or_, and_

from app.domain.common.types import generate_id
from app.domain.social.models import Friendship, FriendshipStatus, BlockedUser, pair_key
from app.domain.social.repositories import SocialGraphRepository
from app.infra.db.models.social import FriendshipModel, BlockedUserModel


def _involves(user_id: str):
    return or_(FriendshipModel.sender_id == user_id, FriendshipModel.receiver_id == user_id)


class SocialGraphRepositoryImpl(SocialGraphRepository):
    """Social graph repository implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # Friendships
    async def find_friendship_between(self, user_a: str, user_b: str) -> Optional[Friendship]:
        result = await self.session.execute(
            select(FriendshipModel).where(FriendshipModel.pair_key == pair_key(user_a, user_b))
        )
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def get_friendship(self, friendship_id: str) -> Optional[Friendship]:
        model = await self.session.get(FriendshipModel, friendship_id)
        return model.to_entity() if model else None

    async def create_friendship(self, sender_id: str, receiver_id: str) -> Friendship:
        """Insert a PENDING request. Raises IntegrityError if the pair already has a record."""
        now = datetime.utcnow()
        model = FriendshipModel(
            id=generate_id(),
            sender_id=sender_id,
            receiver_id=receiver_id,
            status=FriendshipStatus.PENDING,
            pair_key=pair_key(sender_id, receiver_id),
            created_at=now,
            updated_at=now,
        )
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

    async def reopen_friendship(self, friendship_id: str, sender_id: str, receiver_id: str) -> Friendship:
        model = await self.session.get(FriendshipModel, friendship_id)
        model.sender_id = sender_id
        model.receiver_id = receiver_id
        model.status = FriendshipStatus.PENDING
        model.updated_at = datetime.utcnow()
        await self.session.flush()
        return model.to_entity()

    async def set_status(self, friendship_id: str, status: FriendshipStatus) -> Friendship:
        model = await self.session.get(FriendshipModel, friendship_id)
        model.status = status
        model.updated_at = datetime.utcnow()
        await self.session.flush()
        return model.to_entity()

    async def list_incoming_pending(self, user_id: str) -> list[Friendship]:
        """Requests waiting for user_id to respond, oldest first."""
        result = await self.session.execute(
            select(FriendshipModel)
            .where(
                FriendshipModel.receiver_id == user_id,
                FriendshipModel.status == FriendshipStatus.PENDING,
            )
            .order_by(FriendshipModel.created_at)
        )
        return [m.to_entity() for m in result.scalars().all()]

    async def list_accepted_friend_ids(self, user_id: str) -> set[str]:
        result = await self.session.execute(
            select(FriendshipModel.sender_id, FriendshipModel.receiver_id).where(
                _involves(user_id),
                FriendshipModel.status == FriendshipStatus.ACCEPTED,
            )
        )
        return {
            receiver if sender == user_id else sender
            for sender, receiver in result.all()
        }

    async def count_accepted(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(FriendshipModel).where(
                _involves(user_id),
                FriendshipModel.status == FriendshipStatus.ACCEPTED,
            )
        )
        return result.scalar() or 0

    async def are_friends(self, user_a: str, user_b: str) -> bool:
        friendship = await self.find_friendship_between(user_a, user_b)
        return friendship is not None and friendship.status == FriendshipStatus.ACCEPTED

    # Blocks
    async def is_blocked_between(self, user_a: str, user_b: str) -> bool:
        result = await self.session.execute(
            select(BlockedUserModel.id).where(
                or_(
                    and_(BlockedUserModel.blocker_id == user_a, BlockedUserModel.blocked_id == user_b),
                    and_(BlockedUserModel.blocker_id == user_b, BlockedUserModel.blocked_id == user_a),
                )
            ).limit(1)
        )
        return result.first() is not None

    async def blocked_ids_for(self, user_id: str) -> set[str]:
        result = await self.session.execute(
            select(BlockedUserModel.blocker_id, BlockedUserModel.blocked_id).where(
                or_(BlockedUserModel.blocker_id == user_id, BlockedUserModel.blocked_id == user_id)
            )
        )
        return {
            blocked if blocker == user_id else blocker
            for blocker, blocked in result.all()
        }

    async def _get_block(self, blocker_id: str, blocked_id: str) -> Optional[BlockedUserModel]:
        result = await self.session.execute(
            select(BlockedUserModel).where(
                BlockedUserModel.blocker_id == blocker_id,
                BlockedUserModel.blocked_id == blocked_id,
            )
        )
        return result.scalar_one_or_none()

    async def upsert_block(self, blocker_id: str, blocked_id: str) -> BlockedUser:
        """Create the block edge unless it already exists."""
        model = await self._get_block(blocker_id, blocked_id)
        if model is None:
            model = BlockedUserModel(
                id=generate_id(),
                blocker_id=blocker_id,
                blocked_id=blocked_id,
                created_at=datetime.utcnow(),
            )
            self.session.add(model)
            await self.session.flush()
        return model.to_entity()

    async def delete_block(self, blocker_id: str, blocked_id: str) -> bool:
        result = await self.session.execute(
            delete(BlockedUserModel).where(
                BlockedUserModel.blocker_id == blocker_id,
                BlockedUserModel.blocked_id == blocked_id,
            )
        )
        return (result.rowcount or 0) > 0

    async def list_blocked_by(self, blocker_id: str) -> list[BlockedUser]:
        result = await self.session.execute(
            select(BlockedUserModel)
            .where(BlockedUserModel.blocker_id == blocker_id)
            .order_by(BlockedUserModel.created_at.desc())
        )
        return [m.to_entity() for m in result.scalars().all()]

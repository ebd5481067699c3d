"""Social graph repository protocol."""
from typing import Optional, Protocol

from app.domain.social.models import Friendship, FriendshipStatus, BlockedUser


class SocialGraphRepository(Protocol):
    """Friendship and block edges."""

    async def find_friendship_between(self, user_a: str, user_b: str) -> Optional[Friendship]:
        """The single friendship record for the unordered pair, in either direction."""
        ...

    async def get_friendship(self, friendship_id: str) -> Optional[Friendship]:
        ...

    async def create_friendship(self, sender_id: str, receiver_id: str) -> Friendship:
        ...

    async def reopen_friendship(self, friendship_id: str, sender_id: str, receiver_id: str) -> Friendship:
        """Reset a REJECTED record to PENDING with a new direction."""
        ...

    async def set_status(self, friendship_id: str, status: FriendshipStatus) -> Friendship:
        ...

    async def list_incoming_pending(self, user_id: str) -> list[Friendship]:
        ...

    async def list_accepted_friend_ids(self, user_id: str) -> set[str]:
        ...

    async def count_accepted(self, user_id: str) -> int:
        ...

    async def are_friends(self, user_a: str, user_b: str) -> bool:
        ...

    async def is_blocked_between(self, user_a: str, user_b: str) -> bool:
        """True if either user has blocked the other."""
        ...

    async def blocked_ids_for(self, user_id: str) -> set[str]:
        """Users related to user_id by a block edge in either direction."""
        ...

    async def upsert_block(self, blocker_id: str, blocked_id: str) -> BlockedUser:
        ...

    async def delete_block(self, blocker_id: str, blocked_id: str) -> bool:
        ...

    async def list_blocked_by(self, blocker_id: str) -> list[BlockedUser]:
        ...

"""Social graph domain models: friendships, blocks and profile access levels."""
import enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class FriendshipStatus(str, enum.Enum):
    """Friendship status enum."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class FriendRequestAction(str, enum.Enum):
    """Receiver's answer to a pending request."""
    ACCEPT = "ACCEPT"
    REJECT = "REJECT"


class ProfileAccess(str, enum.Enum):
    """How much of a profile a viewer may see."""
    FULL = "FULL"
    RESTRICTED = "RESTRICTED"
    DENIED = "DENIED"


def pair_key(user_a: str, user_b: str) -> str:
    """Order-independent key for a pair of users (one friendship row per unordered pair)."""
    low, high = sorted((user_a, user_b))
    return f"{low}:{high}"


class Friendship(BaseModel):
    """Directed friendship edge; ACCEPTED edges are read symmetrically."""

    id: str
    sender_id: str
    receiver_id: str
    status: FriendshipStatus
    created_at: datetime
    updated_at: datetime

    def other(self, user_id: str) -> str:
        """The counterpart of user_id in this edge."""
        return self.receiver_id if self.sender_id == user_id else self.sender_id

    @property
    def is_active(self) -> bool:
        """PENDING and ACCEPTED edges block a new request; REJECTED does not."""
        return self.status in (FriendshipStatus.PENDING, FriendshipStatus.ACCEPTED)


class BlockedUser(BaseModel):
    """Directed block edge (blocker -> blocked); policy checks read it both ways."""

    id: str
    blocker_id: str
    blocked_id: str
    created_at: Optional[datetime] = None

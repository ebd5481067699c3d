"""Chat domain models."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class ChatRoom:
    """Chat room. Direct rooms (is_group False) have exactly two participants."""
    id: str
    is_group: bool
    name: Optional[str]
    created_at: datetime
    updated_at: datetime
    participant_ids: list[str] = field(default_factory=list)

    def counterpart(self, user_id: str) -> Optional[str]:
        """The other participant of a direct room."""
        if self.is_group:
            return None
        others = [p for p in self.participant_ids if p != user_id]
        return others[0] if others else None


@dataclass
class Message:
    """Chat message domain model."""
    id: str
    room_id: str
    sender_id: str
    content: str
    reply_to_id: Optional[str]
    created_at: datetime

"""Notification domain models."""
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class NotificationType(str, enum.Enum):
    """What triggered the notification."""
    LIKE = "LIKE"
    COMMENT = "COMMENT"
    FRIEND_REQUEST = "FRIEND_REQUEST"
    MESSAGE = "MESSAGE"
    ACHIEVEMENT = "ACHIEVEMENT"


@dataclass
class Notification:
    """Inbox entry. sender_id is None for system notifications (badges)."""
    id: str
    user_id: str
    type: NotificationType
    sender_id: Optional[str]
    entity_id: Optional[str]  # post, friendship, room or badge id
    content: str
    is_read: bool
    created_at: datetime

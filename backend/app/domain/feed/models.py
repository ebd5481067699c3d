"""Feed domain models: posts and threaded comments."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Comment:
    """Comment on a post. parent_id points at a top-level comment for replies."""
    id: str
    post_id: str
    user_id: str
    author: str
    content: str
    parent_id: Optional[str]
    created_at: datetime
    author_avatar_url: Optional[str] = None


@dataclass
class Post:
    """Progress post. liked_by keeps insertion order; likes is its length."""
    id: str
    user_id: str
    author: str  # display-name snapshot at creation time
    content: str
    liked_by: list[str]
    created_at: datetime
    comments: list[Comment] = field(default_factory=list)
    author_username: Optional[str] = None
    author_avatar_url: Optional[str] = None

    @property
    def likes(self) -> int:
        return len(self.liked_by)

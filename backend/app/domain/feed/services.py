"""Feed domain services: the visibility-filtered feed, posts, likes and comments."""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.accounts.models import User
from app.domain.common.errors import NotFoundError, ValidationError
from app.domain.feed.models import Post, Comment
from app.domain.notifications.models import NotificationType
from app.domain.social.policies import VisibilityPolicy
from app.infra.db.repositories.post_repo import PostRepository
from app.infra.db.repositories.social_repo import SocialGraphRepositoryImpl
from app.infra.db.repositories.user_repo import UserRepositoryImpl
from app.services.notification_service import deliver_notification
from app.settings import settings

logger = logging.getLogger(__name__)


class FeedService:
    """Feed aggregation and post interactions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.posts = PostRepository(db)
        self.users = UserRepositoryImpl(db)
        self.graph = SocialGraphRepositoryImpl(db)
        self.policy = VisibilityPolicy(self.graph)

    async def feed_for(self, viewer: User, limit: Optional[int] = None) -> list[Post]:
        """Newest-first posts visible to viewer, capped, with full comment threads."""
        friend_ids = await self.graph.list_accepted_friend_ids(viewer.id)
        blocked_ids = await self.graph.blocked_ids_for(viewer.id)
        return await self.posts.feed(
            viewer_id=viewer.id,
            friend_ids=friend_ids,
            excluded_author_ids=blocked_ids,
            limit=limit or settings.feed_limit,
        )

    async def create_post(self, author: User, content: str) -> Post:
        content = (content or "").strip()
        if not content:
            raise ValidationError("Post content is required")
        post = await self.posts.create(author.id, author.name, content)
        await self.db.commit()
        post.author_username = author.username
        post.author_avatar_url = author.avatar_url
        return post

    async def _visible_post(self, viewer: User, post_id: str, for_update: bool = False) -> Post:
        """Posts the viewer may not see are reported as missing."""
        post = await self.posts.get(post_id, for_update=for_update)
        if post is None:
            raise NotFoundError("Post", post_id)
        author = await self.users.get_by_id(post.user_id)
        if author is None or not await self.policy.can_view_post(viewer.id, author):
            raise NotFoundError("Post", post_id)
        return post

    async def toggle_like(self, viewer: User, post_id: str) -> tuple[int, bool]:
        """Add or remove the viewer's like. Returns (likes, liked)."""
        try:
            post = await self._visible_post(viewer, post_id, for_update=True)
            liked_by = list(post.liked_by)
            if viewer.id in liked_by:
                liked_by.remove(viewer.id)
                liked = False
            else:
                liked_by.append(viewer.id)
                liked = True
            await self.posts.set_liked_by(post.id, liked_by)
            if liked:
                await deliver_notification(
                    self.db,
                    post.user_id,
                    NotificationType.LIKE,
                    viewer.id,
                    post.id,
                    f"{viewer.name} liked your post",
                )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return len(liked_by), liked

    async def add_comment(
        self, viewer: User, post_id: str, content: str, parent_id: Optional[str] = None
    ) -> Comment:
        """Comment on a post. A reply to a reply is attached to the top-level comment."""
        content = (content or "").strip()
        if not content:
            raise ValidationError("Comment content is required")
        post = await self._visible_post(viewer, post_id)

        if parent_id:
            parent = await self.posts.get_comment(parent_id)
            if parent is None or parent.post_id != post.id:
                raise ValidationError("Parent comment does not belong to this post")
            parent_id = parent.parent_id or parent.id

        try:
            comment = await self.posts.add_comment(post.id, viewer.id, viewer.name, content, parent_id)
            await deliver_notification(
                self.db,
                post.user_id,
                NotificationType.COMMENT,
                viewer.id,
                post.id,
                f"{viewer.name} commented on your post",
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        comment.author_avatar_url = viewer.avatar_url
        return comment

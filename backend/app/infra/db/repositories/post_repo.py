"""Post and comment repository."""
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, and_

from app.domain.accounts.models import ProfileVisibility
from app.domain.common.types import generate_id
from app.domain.feed.models import Post, Comment
from app.infra.db.models.post import PostModel, CommentModel
from app.infra.db.models.user import UserModel


class PostRepository:
    """Repository for posts and their comments."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user_id: str, author: str, content: str) -> Post:
        model = PostModel(
            id=generate_id(),
            user_id=user_id,
            author=author,
            content=content,
            liked_by=[],
            likes=0,
            created_at=datetime.utcnow(),
        )
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

    async def get(self, post_id: str, for_update: bool = False) -> Optional[Post]:
        """Load a post; for_update takes a row lock (PostgreSQL) for read-modify-write."""
        q = select(PostModel).where(PostModel.id == post_id)
        if for_update:
            q = q.with_for_update()
        result = await self.session.execute(q)
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def set_liked_by(self, post_id: str, liked_by: list[str]) -> None:
        """Replace the like list; the counter always follows its length."""
        model = await self.session.get(PostModel, post_id)
        model.liked_by = list(liked_by)
        model.likes = len(liked_by)
        await self.session.flush()

    async def count_by_user(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(PostModel).where(PostModel.user_id == user_id)
        )
        return result.scalar() or 0

    async def feed(
        self,
        viewer_id: str,
        friend_ids: set[str],
        excluded_author_ids: set[str],
        limit: int = 50,
    ) -> list[Post]:
        """Posts visible to viewer_id, newest first, with comments attached oldest first."""
        visible = [
            PostModel.user_id == viewer_id,
            UserModel.profile_visibility == ProfileVisibility.PUBLIC,
        ]
        if friend_ids:
            visible.append(
                and_(
                    PostModel.user_id.in_(list(friend_ids)),
                    UserModel.profile_visibility == ProfileVisibility.FRIENDS,
                )
            )
        q = (
            select(PostModel, UserModel.username, UserModel.avatar_url)
            .join(UserModel, UserModel.id == PostModel.user_id)
            .where(or_(*visible))
            .order_by(PostModel.created_at.desc(), PostModel.id)
            .limit(limit)
        )
        if excluded_author_ids:
            q = q.where(PostModel.user_id.notin_(list(excluded_author_ids)))
        result = await self.session.execute(q)

        posts = []
        for model, username, avatar_url in result.all():
            post = model.to_entity()
            post.author_username = username
            post.author_avatar_url = avatar_url
            posts.append(post)

        comments = await self.comments_for([p.id for p in posts])
        for post in posts:
            post.comments = comments.get(post.id, [])
        return posts

    async def comments_for(self, post_ids: list[str]) -> dict[str, list[Comment]]:
        """All comments of the given posts, grouped by post, oldest first."""
        if not post_ids:
            return {}
        result = await self.session.execute(
            select(CommentModel, UserModel.avatar_url)
            .join(UserModel, UserModel.id == CommentModel.user_id)
            .where(CommentModel.post_id.in_(post_ids))
            .order_by(CommentModel.created_at, CommentModel.id)
        )
        grouped: dict[str, list[Comment]] = {}
        for model, avatar_url in result.all():
            comment = model.to_entity()
            comment.author_avatar_url = avatar_url
            grouped.setdefault(comment.post_id, []).append(comment)
        return grouped

    async def get_comment(self, comment_id: str) -> Optional[Comment]:
        model = await self.session.get(CommentModel, comment_id)
        return model.to_entity() if model else None

    async def add_comment(
        self,
        post_id: str,
        user_id: str,
        author: str,
        content: str,
        parent_id: Optional[str] = None,
    ) -> Comment:
        model = CommentModel(
            id=generate_id(),
            post_id=post_id,
            user_id=user_id,
            author=author,
            content=content,
            parent_id=parent_id,
            created_at=datetime.utcnow(),
        )
        self.session.add(model)
        await self.session.flush()
        return model.to_entity()

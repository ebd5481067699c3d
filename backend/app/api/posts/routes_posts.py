"""Post and feed API routes."""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.domain.accounts.models import User
from app.domain.feed.models import Post, Comment
from app.domain.feed.services import FeedService

router = APIRouter()


class PostCreateRequest(BaseModel):
    """Create post request."""
    content: Optional[str] = None


class CommentCreateRequest(BaseModel):
    """Create comment request; parent_id makes it a reply."""
    content: Optional[str] = None
    parent_id: Optional[str] = None


class CommentResponse(BaseModel):
    """Comment response."""
    id: str
    post_id: str
    user_id: str
    author: str
    author_avatar_url: Optional[str] = None
    content: str
    parent_id: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            post_id=comment.post_id,
            user_id=comment.user_id,
            author=comment.author,
            author_avatar_url=comment.author_avatar_url,
            content=comment.content,
            parent_id=comment.parent_id,
            created_at=comment.created_at,
        )


class PostResponse(BaseModel):
    """Post response with its comment thread."""
    id: str
    user_id: str
    author: str
    author_username: Optional[str] = None
    author_avatar_url: Optional[str] = None
    content: str
    likes: int
    liked_by: list[str]
    liked: bool
    created_at: datetime
    comments: list[CommentResponse]

    @classmethod
    def from_entity(cls, post: Post, viewer_id: str) -> "PostResponse":
        return cls(
            id=post.id,
            user_id=post.user_id,
            author=post.author,
            author_username=post.author_username,
            author_avatar_url=post.author_avatar_url,
            content=post.content,
            likes=post.likes,
            liked_by=post.liked_by,
            liked=viewer_id in post.liked_by,
            created_at=post.created_at,
            comments=[CommentResponse.from_entity(c) for c in post.comments],
        )


class LikeResponse(BaseModel):
    """Like toggle result."""
    likes: int
    liked: bool


@router.get("/feed", response_model=list[PostResponse])
async def get_feed(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Posts visible to the current user, newest first."""
    posts = await FeedService(db).feed_for(current_user)
    return [PostResponse.from_entity(p, current_user.id) for p in posts]


@router.post("", response_model=PostResponse)
async def create_post(
    request: PostCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a progress post."""
    post = await FeedService(db).create_post(current_user, request.content or "")
    return PostResponse.from_entity(post, current_user.id)


@router.post("/{post_id}/like", response_model=LikeResponse)
async def toggle_like(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Like or unlike a post."""
    likes, liked = await FeedService(db).toggle_like(current_user, post_id)
    return LikeResponse(likes=likes, liked=liked)


@router.post("/{post_id}/comment", response_model=CommentResponse)
async def add_comment(
    post_id: str,
    request: CommentCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Comment on a post, or reply to a comment."""
    comment = await FeedService(db).add_comment(
        current_user, post_id, request.content or "", request.parent_id
    )
    return CommentResponse.from_entity(comment)

"""Post and comment database models."""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Text, Index

from app.infra.db.base import Base, JSONType
from app.domain.feed.models import Post as PostEntity, Comment as CommentEntity


class PostModel(Base):
    """Post database model."""

    __tablename__ = "posts"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    author = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    liked_by = Column(JSONType, nullable=False, default=list)  # user ids, in like order
    likes = Column(Integer, default=0, nullable=False)  # len(liked_by), kept for sorting/analytics
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def to_entity(self) -> PostEntity:
        """Convert to domain entity (comments are attached by the repository)."""
        return PostEntity(
            id=self.id,
            user_id=self.user_id,
            author=self.author,
            content=self.content,
            liked_by=list(self.liked_by or []),
            created_at=self.created_at,
        )


class CommentModel(Base):
    """Comment database model."""

    __tablename__ = "comments"

    id = Column(String, primary_key=True)
    post_id = Column(String, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    author = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    parent_id = Column(String, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (Index("ix_comments_post_created", "post_id", "created_at"),)

    def to_entity(self) -> CommentEntity:
        return CommentEntity(
            id=self.id,
            post_id=self.post_id,
            user_id=self.user_id,
            author=self.author,
            content=self.content,
            parent_id=self.parent_id,
            created_at=self.created_at,
        )

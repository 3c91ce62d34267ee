# src/blog_board/models/comment.py
"""SQLAlchemy model for comments left on posts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blog_board.db.session import Base

if TYPE_CHECKING:
    from blog_board.models.post import Post


class PostComment(Base):
    """Comment attached to exactly one post; the child side holds the key."""

    __tablename__ = "post_comment"
    __table_args__ = (Index("ix_post_comment_post_id", "post_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)

    post: Mapped[Post] = relationship("Post", back_populates="comments")

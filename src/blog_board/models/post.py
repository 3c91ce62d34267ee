# src/blog_board/models/post.py
"""SQLAlchemy models for posts and their one-to-one detail record."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blog_board.db.session import Base
from blog_board.db.time import utcnow

if TYPE_CHECKING:
    from blog_board.models.comment import PostComment
    from blog_board.models.tag import PostTag

POST_TITLE_COLUMN_LENGTH = 1024


class Post(Base):
    """Root aggregate of the blog.

    A post owns its detail record and its comments; tag links are owned by the
    junction rows and go away with either side.
    """

    __tablename__ = "post"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(POST_TITLE_COLUMN_LENGTH), nullable=False)
    # Bumped on every UPDATE; a mismatch raises StaleDataError on flush.
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    detail: Mapped[PostDetail] = relationship(
        "PostDetail",
        back_populates="post",
        cascade="all, delete-orphan",
        uselist=False,
    )
    comments: Mapped[list[PostComment]] = relationship(
        "PostComment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostComment.id",
    )
    tag_links: Mapped[list[PostTag]] = relationship(
        "PostTag",
        back_populates="post",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version}


class PostDetail(Base):
    """Creation metadata kept beside the post, keyed by the post identifier."""

    __tablename__ = "post_detail"

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.current_timestamp(),
    )

    post: Mapped[Post] = relationship("Post", back_populates="detail")

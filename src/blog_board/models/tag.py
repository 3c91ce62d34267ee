# src/blog_board/models/tag.py
"""Models for tags and the junction table linking them to posts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blog_board.db.session import Base

if TYPE_CHECKING:
    from blog_board.models.post import Post


class Tag(Base):
    """Label shared between posts; names are unique."""

    __tablename__ = "tag"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    post_links: Mapped[list[PostTag]] = relationship(
        "PostTag",
        back_populates="tag",
        cascade="all, delete-orphan",
    )


class PostTag(Base):
    """Join table mapping posts onto tags."""

    __tablename__ = "post_tag"
    __table_args__ = (
        UniqueConstraint("post_id", "tag_id", name="uq_post_tag_post_id_tag_id"),
        Index("ix_post_tag_tag_id", "tag_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    tag_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tag.id", ondelete="CASCADE"),
        nullable=False,
    )

    post: Mapped[Post] = relationship("Post", back_populates="tag_links")
    tag: Mapped[Tag] = relationship("Tag", back_populates="post_links")

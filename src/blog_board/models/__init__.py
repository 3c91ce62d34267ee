# src/blog_board/models/__init__.py
"""SQLAlchemy models for the blog board."""

from .comment import PostComment
from .post import Post, PostDetail
from .tag import PostTag, Tag

__all__ = [
    "Post", "PostDetail",
    "PostComment",
    "Tag", "PostTag",
]

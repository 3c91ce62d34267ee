# src/blog_board/schemas/__init__.py
"""Pydantic schemas exchanged between the repositories, the service and callers."""

from .comment import CommentCreate, CommentOut, CommentUpdate
from .post import PostCreate, PostDetailCreate, PostDetailOut, PostOut, PostUpdate
from .tag import TagCreate, TagOut

__all__ = [
    "CommentCreate", "CommentOut", "CommentUpdate",
    "PostCreate", "PostDetailCreate", "PostDetailOut", "PostOut", "PostUpdate",
    "TagCreate", "TagOut",
]

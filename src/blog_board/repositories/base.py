"""Persistence boundary used by the blog service."""
from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol

from blog_board.schemas import CommentOut, PostOut, TagOut

__all__ = ["BlogRepository"]


class BlogRepository(Protocol):
    """Per-entity CRUD plus tag association maintenance.

    Implementations must:

    * delete a post's detail, comments and tag links together with the post,
      and a tag's links together with the tag;
    * raise :class:`~blog_board.errors.ConflictError` when a uniqueness
      constraint (tag name, post detail key, post/tag pair) would be violated;
    * make :meth:`atomic` all-or-nothing. Blocks may nest and only the
      outermost one commits.
    """

    def atomic(self) -> AbstractContextManager[None]:
        """Open a unit of work."""
        ...

    # Posts

    def create_post(self, *, title: str, created_by: str) -> PostOut:
        """Insert a post together with its detail record."""
        ...

    def get_post(self, post_id: int) -> PostOut | None:
        """Return a post by identifier."""
        ...

    def find_post_by_title(self, title: str) -> PostOut | None:
        """Return the lowest-id post whose title matches exactly."""
        ...

    def list_posts(self) -> list[PostOut]:
        """Return every post ordered by identifier."""
        ...

    def update_post_title(
        self,
        post_id: int,
        title: str,
        *,
        expected_version: int | None = None,
    ) -> PostOut | None:
        """Replace a post title; ``None`` if the post does not exist."""
        ...

    def delete_post(self, post_id: int) -> bool:
        """Delete a post and its dependents; ``False`` if it did not exist."""
        ...

    # Comments

    def create_comment(self, *, post_id: int, body: str) -> CommentOut:
        """Insert a comment on an existing post."""
        ...

    def get_comment(self, comment_id: int) -> CommentOut | None:
        """Return a comment by identifier."""
        ...

    def update_comment(self, comment_id: int, body: str) -> CommentOut | None:
        """Replace a comment body; ``None`` if the comment does not exist."""
        ...

    def delete_comment(self, comment_id: int) -> bool:
        """Delete a comment; ``False`` if it did not exist."""
        ...

    def list_comments_for_post(self, post_id: int) -> list[CommentOut]:
        """Return the comments of a post ordered by identifier."""
        ...

    # Tags

    def create_tag(self, name: str) -> TagOut:
        """Insert a tag with a unique name."""
        ...

    def get_tag_by_name(self, name: str) -> TagOut | None:
        """Return a tag by exact name."""
        ...

    def list_tags(self) -> list[TagOut]:
        """Return every tag ordered by name."""
        ...

    def delete_tag(self, tag_id: int) -> bool:
        """Delete a tag and its post links; ``False`` if it did not exist."""
        ...

    def link_tag(self, post_id: int, tag_id: int) -> bool:
        """Associate a tag with a post; ``False`` if already associated."""
        ...

    def unlink_tag(self, post_id: int, tag_id: int) -> bool:
        """Remove an association; ``False`` if there was none."""
        ...

    def list_tags_for_post(self, post_id: int) -> list[TagOut]:
        """Return the tags of a post ordered by name."""
        ...

    def list_posts_for_tag(self, tag_id: int) -> list[PostOut]:
        """Return the posts carrying a tag ordered by identifier."""
        ...

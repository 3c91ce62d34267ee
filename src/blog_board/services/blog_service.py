"""Domain service orchestrating posts, comments and tags.

The service validates input, checks references the schema alone cannot check
in a useful way (a comment must belong to the post named by the caller), and
runs every write inside one repository unit of work.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from blog_board.core.settings import Settings, settings
from blog_board.db.session import session_scope
from blog_board.errors import NotFoundError, ValidationError
from blog_board.repositories.base import BlogRepository
from blog_board.repositories.sql import SqlBlogRepository
from blog_board.schemas import (
    CommentCreate,
    CommentOut,
    CommentUpdate,
    PostCreate,
    PostDetailCreate,
    PostOut,
    PostUpdate,
    TagCreate,
    TagOut,
)

# Configure logger for this module
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

__all__ = ["BlogService", "get_blog_service", "open_blog_service"]


def _parse(schema: type[ModelT], data: Mapping[str, Any]) -> ModelT:
    """Build an input schema, reporting the first failing field as a domain error."""
    try:
        return schema.model_validate(dict(data))
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or schema.__name__
        raise ValidationError(field, error["msg"]) from exc


class BlogService:
    """Service implementing the blog's post, comment and tag operations."""

    def __init__(self, repo: BlogRepository, *, config: Settings | None = None) -> None:
        self.repo = repo
        self.config = config or settings

    # Validation helpers

    def _check_title(self, title: str) -> None:
        limit = self.config.post_title_max_length
        if len(title) > limit:
            raise ValidationError("title", f"must be at most {limit} characters")

    def _tag_create(self, name: str) -> TagCreate:
        tag = _parse(TagCreate, {"name": name})
        limit = self.config.tag_name_max_length
        if len(tag.name) > limit:
            raise ValidationError("name", f"must be at most {limit} characters")
        return tag

    def _require_post(self, post_id: int) -> PostOut:
        post = self.repo.get_post(post_id)
        if post is None:
            raise NotFoundError("post", post_id)
        return post

    def _require_comment(self, post_id: int, comment_id: int) -> CommentOut:
        self._require_post(post_id)
        comment = self.repo.get_comment(comment_id)
        # A comment that exists under another post is reported as missing.
        if comment is None or comment.post_id != post_id:
            raise NotFoundError("comment", comment_id)
        return comment

    def _require_tag(self, name: str) -> TagOut:
        tag = self.repo.get_tag_by_name(name)
        if tag is None:
            raise NotFoundError("tag", name)
        return tag

    # Posts

    def get_all_posts(self) -> list[PostOut]:
        """Return every post ordered by identifier, with detail, tags and comment count."""
        posts = self.repo.list_posts()
        logger.debug("Listed %d posts", len(posts))
        return posts

    def get_post_by_id(self, post_id: int) -> PostOut:
        """Return a post or raise :class:`NotFoundError`."""
        return self._require_post(post_id)

    def get_post_by_title(self, title: str) -> PostOut:
        """Return the post with exactly this title.

        Matching is case-sensitive. When several posts share a title the one
        with the lowest identifier is returned.
        """
        post = self.repo.find_post_by_title(title)
        if post is None:
            raise NotFoundError("post", title)
        return post

    def add_post(self, title: str, detail: PostDetailCreate | Mapping[str, Any]) -> PostOut:
        """Create a post together with its detail record.

        Args:
            title: Non-blank title within the configured length bound.
            detail: Detail payload; ``created_by`` is required.

        Raises:
            ValidationError: If the title or the detail is invalid.
            ConflictError: If the detail violates a uniqueness constraint.
        """
        if isinstance(detail, BaseModel):
            detail = detail.model_dump()
        payload = _parse(PostCreate, {"title": title, "detail": detail})
        self._check_title(payload.title)
        with self.repo.atomic():
            post = self.repo.create_post(
                title=payload.title,
                created_by=payload.detail.created_by,
            )
        logger.info("Created post %d by %s", post.id, post.detail.created_by)
        return post

    def edit_post(self, post_id: int, title: str, *, expected_version: int | None = None) -> PostOut:
        """Replace the title of a post, leaving its detail, comments and tags alone.

        Raises:
            NotFoundError: If the post does not exist.
            ValidationError: If the new title is invalid.
            ConflictError: If ``expected_version`` no longer matches the stored post.
        """
        payload = _parse(PostUpdate, {"title": title, "expected_version": expected_version})
        self._check_title(payload.title)
        with self.repo.atomic():
            post = self.repo.update_post_title(
                post_id,
                payload.title,
                expected_version=payload.expected_version,
            )
            if post is None:
                raise NotFoundError("post", post_id)
        logger.info("Renamed post %d (version %d)", post.id, post.version)
        return post

    def delete_post(self, post_id: int) -> None:
        """Delete a post with its detail, comments and tag links; tags survive."""
        with self.repo.atomic():
            if not self.repo.delete_post(post_id):
                raise NotFoundError("post", post_id)
        logger.info("Deleted post %d", post_id)

    # Comments

    def get_comments(self, post_id: int) -> list[CommentOut]:
        """Return the comments of a post ordered by identifier."""
        self._require_post(post_id)
        return self.repo.list_comments_for_post(post_id)

    def get_comment(self, post_id: int, comment_id: int) -> CommentOut:
        """Return a comment that belongs to the given post."""
        return self._require_comment(post_id, comment_id)

    def add_comment(self, post_id: int, body: str) -> CommentOut:
        """Add a comment to an existing post."""
        payload = _parse(CommentCreate, {"body": body})
        with self.repo.atomic():
            self._require_post(post_id)
            comment = self.repo.create_comment(post_id=post_id, body=payload.body)
        logger.info("Added comment %d to post %d", comment.id, post_id)
        return comment

    def edit_comment(self, post_id: int, comment_id: int, body: str) -> CommentOut:
        """Replace the body of a comment scoped to its post."""
        payload = _parse(CommentUpdate, {"body": body})
        with self.repo.atomic():
            self._require_comment(post_id, comment_id)
            comment = self.repo.update_comment(comment_id, payload.body)
            if comment is None:
                raise NotFoundError("comment", comment_id)
        logger.info("Edited comment %d on post %d", comment_id, post_id)
        return comment

    def delete_comment(self, post_id: int, comment_id: int) -> None:
        """Delete a comment scoped to its post."""
        with self.repo.atomic():
            self._require_comment(post_id, comment_id)
            self.repo.delete_comment(comment_id)
        logger.info("Deleted comment %d from post %d", comment_id, post_id)

    # Tags

    def get_all_tags(self) -> list[TagOut]:
        """Return every tag ordered by name."""
        return self.repo.list_tags()

    def add_tag(self, name: str) -> TagOut:
        """Create a tag; a duplicate name raises :class:`ConflictError`."""
        payload = self._tag_create(name)
        with self.repo.atomic():
            tag = self.repo.create_tag(payload.name)
        logger.info("Created tag %d %r", tag.id, tag.name)
        return tag

    def delete_tag(self, name: str) -> None:
        """Delete a tag and its links; the posts it was attached to survive."""
        payload = self._tag_create(name)
        with self.repo.atomic():
            tag = self._require_tag(payload.name)
            self.repo.delete_tag(tag.id)
        logger.info("Deleted tag %d %r", tag.id, tag.name)

    def get_posts_by_tag(self, name: str) -> list[PostOut]:
        """Return posts carrying a tag; an unknown tag yields no posts."""
        payload = self._tag_create(name)
        tag = self.repo.get_tag_by_name(payload.name)
        if tag is None:
            return []
        return self.repo.list_posts_for_tag(tag.id)

    def tag_post(self, post_id: int, tag_name: str) -> PostOut:
        """Attach a tag to a post, creating the tag when the name is new.

        Tagging an already tagged post is a no-op.
        """
        payload = self._tag_create(tag_name)
        with self.repo.atomic():
            self._require_post(post_id)
            tag = self.repo.get_tag_by_name(payload.name)
            if tag is None:
                tag = self.repo.create_tag(payload.name)
                logger.info("Created tag %d %r while tagging post %d", tag.id, tag.name, post_id)
            if self.repo.link_tag(post_id, tag.id):
                logger.info("Tagged post %d with %r", post_id, tag.name)
            else:
                logger.debug("Post %d already tagged with %r", post_id, tag.name)
            post = self._require_post(post_id)
        return post

    def untag_post(self, post_id: int, tag_name: str) -> PostOut:
        """Detach a tag from a post; a missing link or tag is not an error."""
        payload = self._tag_create(tag_name)
        with self.repo.atomic():
            self._require_post(post_id)
            tag = self.repo.get_tag_by_name(payload.name)
            if tag is not None and self.repo.unlink_tag(post_id, tag.id):
                logger.info("Untagged post %d from %r", post_id, tag.name)
            else:
                logger.debug("Post %d was not tagged with %r", post_id, payload.name)
            post = self._require_post(post_id)
        return post


def get_blog_service(db: Session) -> BlogService:
    """Return a blog service backed by the given database session."""
    return BlogService(SqlBlogRepository(db))


@contextmanager
def open_blog_service() -> Iterator[BlogService]:
    """Yield a blog service on a fresh session that is closed on exit."""
    with session_scope() as db:
        yield get_blog_service(db)

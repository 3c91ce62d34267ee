"""In-memory reference implementation of the blog repository.

Rows live in plain dictionaries keyed by identifier. Foreign keys, unique
constraints and cascades are checked by hand so that the behaviour matches the
SQL schema. A re-entrant lock serializes units of work and a snapshot taken
when the outermost :meth:`InMemoryBlogRepository.atomic` block opens is
restored if the block fails.
"""
from __future__ import annotations

import copy
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from itertools import count

from blog_board.core.settings import settings
from blog_board.db.time import utcnow
from blog_board.errors import ConflictError
from blog_board.schemas import CommentOut, PostDetailOut, PostOut, TagOut

__all__ = ["InMemoryBlogRepository"]


@dataclass
class _PostRow:
    id: int
    title: str
    version: int = 1


@dataclass
class _DetailRow:
    post_id: int
    created_by: str
    created_on: datetime = field(default_factory=utcnow)


@dataclass
class _CommentRow:
    id: int
    post_id: int
    body: str


@dataclass
class _TagRow:
    id: int
    name: str


@dataclass
class _PostTagRow:
    id: int
    post_id: int
    tag_id: int


@dataclass
class _Tables:
    posts: dict[int, _PostRow] = field(default_factory=dict)
    details: dict[int, _DetailRow] = field(default_factory=dict)
    comments: dict[int, _CommentRow] = field(default_factory=dict)
    tags: dict[int, _TagRow] = field(default_factory=dict)
    post_tags: dict[int, _PostTagRow] = field(default_factory=dict)


class InMemoryBlogRepository:
    """Dictionary-backed repository used in tests and as a behavioural reference."""

    def __init__(self, *, unique_detail_author: bool | None = None) -> None:
        if unique_detail_author is None:
            unique_detail_author = settings.unique_detail_author
        self.unique_detail_author = unique_detail_author
        self._tables = _Tables()
        # Sequences keep counting across rollbacks, like database sequences do.
        self._sequences: dict[str, count] = {}
        self._lock = threading.RLock()
        self._depth = 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Hold the lock for the block and undo every change if it raises."""
        with self._lock:
            self._depth += 1
            snapshot = copy.deepcopy(self._tables) if self._depth == 1 else None
            try:
                yield
            except BaseException:
                if snapshot is not None:
                    self._tables = snapshot
                raise
            finally:
                self._depth -= 1

    def _next_id(self, table: str) -> int:
        return next(self._sequences.setdefault(table, count(1)))

    def _post_out(self, row: _PostRow) -> PostOut:
        detail = self._tables.details[row.id]
        tags = sorted(
            self._tables.tags[link.tag_id].name
            for link in self._tables.post_tags.values()
            if link.post_id == row.id
        )
        comment_count = sum(1 for c in self._tables.comments.values() if c.post_id == row.id)
        return PostOut(
            id=row.id,
            title=row.title,
            version=row.version,
            detail=PostDetailOut(created_by=detail.created_by, created_on=detail.created_on),
            tags=tags,
            comment_count=comment_count,
        )

    def _require_post(self, post_id: int) -> None:
        if post_id not in self._tables.posts:
            raise ConflictError(f"foreign key violated: post {post_id} does not exist")

    # Posts

    def create_post(self, *, title: str, created_by: str) -> PostOut:
        with self.atomic():
            tables = self._tables
            if self.unique_detail_author and any(
                d.created_by == created_by for d in tables.details.values()
            ):
                raise ConflictError(f"post detail author {created_by!r} already in use")
            row = _PostRow(id=self._next_id("post"), title=title)
            tables.posts[row.id] = row
            tables.details[row.id] = _DetailRow(post_id=row.id, created_by=created_by)
            return self._post_out(row)

    def get_post(self, post_id: int) -> PostOut | None:
        with self._lock:
            row = self._tables.posts.get(post_id)
            return None if row is None else self._post_out(row)

    def find_post_by_title(self, title: str) -> PostOut | None:
        with self._lock:
            for post_id in sorted(self._tables.posts):
                row = self._tables.posts[post_id]
                if row.title == title:
                    return self._post_out(row)
            return None

    def list_posts(self) -> list[PostOut]:
        with self._lock:
            return [self._post_out(self._tables.posts[i]) for i in sorted(self._tables.posts)]

    def update_post_title(
        self,
        post_id: int,
        title: str,
        *,
        expected_version: int | None = None,
    ) -> PostOut | None:
        with self.atomic():
            row = self._tables.posts.get(post_id)
            if row is None:
                return None
            if expected_version is not None and row.version != expected_version:
                raise ConflictError(
                    f"post {post_id} is at version {row.version}, expected {expected_version}"
                )
            row.title = title
            row.version += 1
            return self._post_out(row)

    def delete_post(self, post_id: int) -> bool:
        with self.atomic():
            tables = self._tables
            if tables.posts.pop(post_id, None) is None:
                return False
            tables.details.pop(post_id, None)
            tables.comments = {k: c for k, c in tables.comments.items() if c.post_id != post_id}
            tables.post_tags = {
                k: link for k, link in tables.post_tags.items() if link.post_id != post_id
            }
            return True

    # Comments

    def create_comment(self, *, post_id: int, body: str) -> CommentOut:
        with self.atomic():
            self._require_post(post_id)
            row = _CommentRow(id=self._next_id("post_comment"), post_id=post_id, body=body)
            self._tables.comments[row.id] = row
            return CommentOut.model_validate(row)

    def get_comment(self, comment_id: int) -> CommentOut | None:
        with self._lock:
            row = self._tables.comments.get(comment_id)
            return None if row is None else CommentOut.model_validate(row)

    def update_comment(self, comment_id: int, body: str) -> CommentOut | None:
        with self.atomic():
            row = self._tables.comments.get(comment_id)
            if row is None:
                return None
            row.body = body
            return CommentOut.model_validate(row)

    def delete_comment(self, comment_id: int) -> bool:
        with self.atomic():
            return self._tables.comments.pop(comment_id, None) is not None

    def list_comments_for_post(self, post_id: int) -> list[CommentOut]:
        with self._lock:
            return [
                CommentOut.model_validate(self._tables.comments[i])
                for i in sorted(self._tables.comments)
                if self._tables.comments[i].post_id == post_id
            ]

    # Tags

    def create_tag(self, name: str) -> TagOut:
        with self.atomic():
            if any(t.name == name for t in self._tables.tags.values()):
                raise ConflictError(f"tag {name!r} already exists")
            row = _TagRow(id=self._next_id("tag"), name=name)
            self._tables.tags[row.id] = row
            return TagOut.model_validate(row)

    def get_tag_by_name(self, name: str) -> TagOut | None:
        with self._lock:
            for row in self._tables.tags.values():
                if row.name == name:
                    return TagOut.model_validate(row)
            return None

    def list_tags(self) -> list[TagOut]:
        with self._lock:
            rows = sorted(self._tables.tags.values(), key=lambda t: t.name)
            return [TagOut.model_validate(row) for row in rows]

    def delete_tag(self, tag_id: int) -> bool:
        with self.atomic():
            tables = self._tables
            if tables.tags.pop(tag_id, None) is None:
                return False
            tables.post_tags = {
                k: link for k, link in tables.post_tags.items() if link.tag_id != tag_id
            }
            return True

    def link_tag(self, post_id: int, tag_id: int) -> bool:
        with self.atomic():
            tables = self._tables
            self._require_post(post_id)
            if tag_id not in tables.tags:
                raise ConflictError(f"foreign key violated: tag {tag_id} does not exist")
            if any(
                link.post_id == post_id and link.tag_id == tag_id
                for link in tables.post_tags.values()
            ):
                return False
            row = _PostTagRow(id=self._next_id("post_tag"), post_id=post_id, tag_id=tag_id)
            tables.post_tags[row.id] = row
            return True

    def unlink_tag(self, post_id: int, tag_id: int) -> bool:
        with self.atomic():
            tables = self._tables
            matches = [
                k
                for k, link in tables.post_tags.items()
                if link.post_id == post_id and link.tag_id == tag_id
            ]
            for key in matches:
                del tables.post_tags[key]
            return bool(matches)

    def list_tags_for_post(self, post_id: int) -> list[TagOut]:
        with self._lock:
            rows = [
                self._tables.tags[link.tag_id]
                for link in self._tables.post_tags.values()
                if link.post_id == post_id
            ]
            return [TagOut.model_validate(row) for row in sorted(rows, key=lambda t: t.name)]

    def list_posts_for_tag(self, tag_id: int) -> list[PostOut]:
        with self._lock:
            post_ids = sorted(link.post_id for link in self._tables.post_tags.values() if link.tag_id == tag_id)
            return [self._post_out(self._tables.posts[i]) for i in post_ids]

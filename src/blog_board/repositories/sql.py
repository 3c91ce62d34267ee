"""SQLAlchemy implementation of the blog repository."""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import StaleDataError

from blog_board.core.settings import settings
from blog_board.db.time import as_utc
from blog_board.errors import ConflictError
from blog_board.models import Post, PostComment, PostDetail, PostTag, Tag
from blog_board.schemas import CommentOut, PostDetailOut, PostOut, TagOut

__all__ = ["SqlBlogRepository", "to_post_out"]


def to_post_out(post: Post, *, tags: Sequence[str] = (), comment_count: int = 0) -> PostOut:
    """Convert a Post ORM instance and its aggregates to the outward schema."""
    return PostOut(
        id=post.id,
        title=post.title,
        version=post.version,
        detail=PostDetailOut(
            created_by=post.detail.created_by,
            created_on=as_utc(post.detail.created_on),
        ),
        tags=list(tags),
        comment_count=comment_count,
    )


class SqlBlogRepository:
    """Thin wrapper around database access for posts, comments and tags.

    Every write is flushed immediately so that constraint violations surface
    as :class:`ConflictError` at the call that caused them.
    """

    def __init__(self, session: Session, *, unique_detail_author: bool | None = None) -> None:
        """Initialize the repository with a SQLAlchemy session.

        Args:
            session: Session owned by the caller; the repository commits and
                rolls back on it from :meth:`atomic`.
            unique_detail_author: Reject a second post detail with the same
                ``created_by``. Defaults to the configured setting.
        """
        self.session = session
        if unique_detail_author is None:
            unique_detail_author = settings.unique_detail_author
        self.unique_detail_author = unique_detail_author
        self._depth = 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run the enclosed writes as one transaction.

        Nested blocks join the outer one; only the outermost commits.
        """
        self._depth += 1
        outermost = self._depth == 1
        try:
            yield
            if outermost:
                self._flush()
                try:
                    self.session.commit()
                except IntegrityError as exc:
                    raise ConflictError(f"constraint violated on commit: {exc.orig}") from exc
        except BaseException:
            if outermost:
                self.session.rollback()
            raise
        finally:
            self._depth -= 1

    def _flush(self) -> None:
        try:
            self.session.flush()
        except IntegrityError as exc:
            raise ConflictError(f"constraint violated: {exc.orig}") from exc
        except StaleDataError as exc:
            raise ConflictError("post was modified concurrently") from exc

    def _to_post_outs(self, posts: Sequence[Post]) -> list[PostOut]:
        if not posts:
            return []
        ids = [post.id for post in posts]
        count_rows = self.session.execute(
            select(PostComment.post_id, func.count(PostComment.id))
            .where(PostComment.post_id.in_(ids))
            .group_by(PostComment.post_id)
        ).tuples()
        counts = {post_id: total for post_id, total in count_rows}
        tag_names: defaultdict[int, list[str]] = defaultdict(list)
        rows = self.session.execute(
            select(PostTag.post_id, Tag.name)
            .join(Tag, Tag.id == PostTag.tag_id)
            .where(PostTag.post_id.in_(ids))
            .order_by(Tag.name)
        ).tuples()
        for post_id, name in rows:
            tag_names[post_id].append(name)
        return [
            to_post_out(post, tags=tag_names[post.id], comment_count=counts.get(post.id, 0))
            for post in posts
        ]

    def _to_post_out(self, post: Post) -> PostOut:
        return self._to_post_outs([post])[0]

    def _detail_author_taken(self, created_by: str) -> bool:
        taken = self.session.scalar(
            select(PostDetail.post_id).where(PostDetail.created_by == created_by).limit(1)
        )
        return taken is not None

    # Posts

    def create_post(self, *, title: str, created_by: str) -> PostOut:
        """Insert a new post and its detail record.

        With ``unique_detail_author`` on, a duplicate ``created_by`` is caught
        here; the ``uq_post_detail_created_by`` index rejects the insert when
        another transaction got there first.
        """
        if self.unique_detail_author and self._detail_author_taken(created_by):
            raise ConflictError(f"post detail author {created_by!r} already in use")
        post = Post(title=title, detail=PostDetail(created_by=created_by))
        self.session.add(post)
        self._flush()
        return self._to_post_out(post)

    def get_post(self, post_id: int) -> PostOut | None:
        """Return a post by identifier."""
        post = self.session.get(Post, post_id)
        if post is None:
            return None
        return self._to_post_out(post)

    def find_post_by_title(self, title: str) -> PostOut | None:
        """Return the first post, by identifier, with exactly this title."""
        post = self.session.scalars(
            select(Post).where(Post.title == title).order_by(Post.id).limit(1)
        ).first()
        if post is None:
            return None
        return self._to_post_out(post)

    def list_posts(self) -> list[PostOut]:
        """Return all posts sorted by identifier."""
        posts = self.session.scalars(
            select(Post).options(selectinload(Post.detail)).order_by(Post.id)
        ).all()
        return self._to_post_outs(posts)

    def update_post_title(
        self,
        post_id: int,
        title: str,
        *,
        expected_version: int | None = None,
    ) -> PostOut | None:
        """Replace the title of a post, checking the version when one is given."""
        post = self.session.get(Post, post_id, populate_existing=True)
        if post is None:
            return None
        if expected_version is not None and post.version != expected_version:
            raise ConflictError(
                f"post {post_id} is at version {post.version}, expected {expected_version}"
            )
        post.title = title
        self._flush()
        return self._to_post_out(post)

    def delete_post(self, post_id: int) -> bool:
        """Delete a post; its detail, comments and tag links go with it."""
        post = self.session.get(Post, post_id)
        if post is None:
            return False
        self.session.delete(post)
        self._flush()
        return True

    # Comments

    def create_comment(self, *, post_id: int, body: str) -> CommentOut:
        """Insert a comment on a post."""
        comment = PostComment(post_id=post_id, body=body)
        self.session.add(comment)
        self._flush()
        return CommentOut.model_validate(comment)

    def get_comment(self, comment_id: int) -> CommentOut | None:
        """Return a comment by identifier."""
        comment = self.session.get(PostComment, comment_id)
        if comment is None:
            return None
        return CommentOut.model_validate(comment)

    def update_comment(self, comment_id: int, body: str) -> CommentOut | None:
        """Replace the body of a comment."""
        comment = self.session.get(PostComment, comment_id)
        if comment is None:
            return None
        comment.body = body
        self._flush()
        return CommentOut.model_validate(comment)

    def delete_comment(self, comment_id: int) -> bool:
        """Delete a single comment."""
        comment = self.session.get(PostComment, comment_id)
        if comment is None:
            return False
        self.session.delete(comment)
        self._flush()
        return True

    def list_comments_for_post(self, post_id: int) -> list[CommentOut]:
        """Return the comments of a post sorted by identifier."""
        comments = self.session.scalars(
            select(PostComment).where(PostComment.post_id == post_id).order_by(PostComment.id)
        )
        return [CommentOut.model_validate(comment) for comment in comments]

    # Tags

    def create_tag(self, name: str) -> TagOut:
        """Insert a tag; duplicate names violate the unique constraint."""
        tag = Tag(name=name)
        self.session.add(tag)
        self._flush()
        return TagOut.model_validate(tag)

    def get_tag_by_name(self, name: str) -> TagOut | None:
        """Return a tag by exact name."""
        tag = self.session.scalars(select(Tag).where(Tag.name == name)).first()
        if tag is None:
            return None
        return TagOut.model_validate(tag)

    def list_tags(self) -> list[TagOut]:
        """Return all tags sorted by name."""
        return [TagOut.model_validate(tag) for tag in self.session.scalars(select(Tag).order_by(Tag.name))]

    def delete_tag(self, tag_id: int) -> bool:
        """Delete a tag together with its post links."""
        tag = self.session.get(Tag, tag_id)
        if tag is None:
            return False
        self.session.delete(tag)
        self._flush()
        return True

    def link_tag(self, post_id: int, tag_id: int) -> bool:
        """Add a post/tag link unless it already exists."""
        existing = self.session.scalar(
            select(PostTag.id).where(PostTag.post_id == post_id, PostTag.tag_id == tag_id)
        )
        if existing is not None:
            return False
        self.session.add(PostTag(post_id=post_id, tag_id=tag_id))
        self._flush()
        return True

    def unlink_tag(self, post_id: int, tag_id: int) -> bool:
        """Remove a post/tag link if present."""
        result = self.session.execute(
            delete(PostTag).where(PostTag.post_id == post_id, PostTag.tag_id == tag_id)
        )
        return bool(result.rowcount)

    def list_tags_for_post(self, post_id: int) -> list[TagOut]:
        """Return the tags linked to a post sorted by name."""
        tags = self.session.scalars(
            select(Tag)
            .join(PostTag, PostTag.tag_id == Tag.id)
            .where(PostTag.post_id == post_id)
            .order_by(Tag.name)
        )
        return [TagOut.model_validate(tag) for tag in tags]

    def list_posts_for_tag(self, tag_id: int) -> list[PostOut]:
        """Return the posts linked to a tag sorted by identifier."""
        posts = self.session.scalars(
            select(Post)
            .join(PostTag, PostTag.post_id == Post.id)
            .where(PostTag.tag_id == tag_id)
            .options(selectinload(Post.detail))
            .order_by(Post.id)
        ).all()
        return self._to_post_outs(posts)

"""Tests for the in-memory reference repository."""

import threading

import pytest

from blog_board.errors import ConflictError
from blog_board.repositories import BlogRepository, InMemoryBlogRepository, SqlBlogRepository

REPOSITORY_OPERATIONS = [
    name
    for name, value in vars(BlogRepository).items()
    if callable(value) and not name.startswith("_")
]


@pytest.mark.parametrize("implementation", [InMemoryBlogRepository, SqlBlogRepository])
def test_implementations_cover_every_operation(implementation) -> None:
    missing = [name for name in REPOSITORY_OPERATIONS if not callable(getattr(implementation, name, None))]
    assert missing == []
    assert "link_tag" in REPOSITORY_OPERATIONS
    assert "atomic" in REPOSITORY_OPERATIONS


def test_atomic_restores_snapshot_on_error(memory_repo) -> None:
    kept = memory_repo.create_post(title="Kept", created_by="alice")

    with pytest.raises(RuntimeError):
        with memory_repo.atomic():
            memory_repo.create_comment(post_id=kept.id, body="lost")
            memory_repo.update_post_title(kept.id, "Renamed")
            memory_repo.delete_post(kept.id)
            raise RuntimeError("boom")

    post = memory_repo.get_post(kept.id)
    assert post.title == "Kept"
    assert post.comment_count == 0
    assert memory_repo.list_comments_for_post(kept.id) == []


def test_identifiers_are_not_reused_after_rollback(memory_repo) -> None:
    with pytest.raises(ConflictError):
        with memory_repo.atomic():
            memory_repo.create_post(title="Rolled back", created_by="alice")
            raise ConflictError("forced")

    post = memory_repo.create_post(title="Next", created_by="alice")
    assert post.id == 2


def test_foreign_keys_are_checked(memory_repo) -> None:
    with pytest.raises(ConflictError):
        memory_repo.create_comment(post_id=1, body="dangling")

    post = memory_repo.create_post(title="Post", created_by="alice")
    with pytest.raises(ConflictError):
        memory_repo.link_tag(post.id, 99)


def test_unique_detail_author_variant() -> None:
    repo = InMemoryBlogRepository(unique_detail_author=True)
    repo.create_post(title="First", created_by="alice")
    with pytest.raises(ConflictError):
        repo.create_post(title="Second", created_by="alice")
    assert [post.title for post in repo.list_posts()] == ["First"]


def test_concurrent_tagging_keeps_one_link(memory_repo) -> None:
    post = memory_repo.create_post(title="Busy", created_by="alice")
    tag = memory_repo.create_tag("go")
    results: list[bool] = []

    def worker() -> None:
        results.append(memory_repo.link_tag(post.id, tag.id))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 1
    assert [t.name for t in memory_repo.list_tags_for_post(post.id)] == ["go"]

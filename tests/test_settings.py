"""Tests for environment-driven configuration."""

import pytest

from blog_board.core.settings import Settings
from blog_board.errors import ValidationError
from blog_board.repositories import InMemoryBlogRepository
from blog_board.services import BlogService


def test_defaults(monkeypatch) -> None:
    for name in ("DATABASE_URL", "POST_TITLE_MAX_LENGTH", "UNIQUE_DETAIL_AUTHOR"):
        monkeypatch.delenv(name, raising=False)
    config = Settings(_env_file=None)
    assert config.database_url == "sqlite:///./blog.db"
    assert config.post_title_max_length == 1024
    assert config.unique_detail_author is False


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("POST_TITLE_MAX_LENGTH", "10")
    monkeypatch.setenv("UNIQUE_DETAIL_AUTHOR", "true")
    config = Settings(_env_file=None)
    assert config.post_title_max_length == 10
    assert config.unique_detail_author is True


def test_effective_database_url(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://db/blog")
    monkeypatch.setenv("TEST_DATABASE_URL", "sqlite://")
    monkeypatch.setenv("USE_TEST_DATABASE", "false")
    config = Settings(_env_file=None)
    assert config.effective_database_url == "postgresql+psycopg://db/blog"

    monkeypatch.setenv("USE_TEST_DATABASE", "true")
    assert Settings(_env_file=None).effective_database_url == "sqlite://"


def test_service_uses_configured_title_limit(monkeypatch) -> None:
    monkeypatch.setenv("POST_TITLE_MAX_LENGTH", "10")
    service = BlogService(InMemoryBlogRepository(), config=Settings(_env_file=None))

    service.add_post("x" * 10, {"created_by": "alice"})
    with pytest.raises(ValidationError):
        service.add_post("x" * 11, {"created_by": "alice"})

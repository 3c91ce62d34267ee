# tests/conftest.py
from __future__ import annotations

from collections.abc import Generator, Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from blog_board.core.settings import Settings
from blog_board.db.session import Base
from blog_board.repositories import InMemoryBlogRepository, SqlBlogRepository
from blog_board.repositories.base import BlogRepository
from blog_board.schemas import PostOut
from blog_board.services import BlogService

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def sql_repo(db_session: Session) -> SqlBlogRepository:
    return SqlBlogRepository(db_session, unique_detail_author=False)


@pytest.fixture()
def memory_repo() -> InMemoryBlogRepository:
    return InMemoryBlogRepository(unique_detail_author=False)


@pytest.fixture(params=["memory", "sql"])
def repo(request: pytest.FixtureRequest) -> BlogRepository:
    """Run the test once against each repository implementation."""
    if request.param == "sql":
        return request.getfixturevalue("sql_repo")
    return request.getfixturevalue("memory_repo")


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide settings with the default field limits regardless of the environment."""
    return Settings(
        POST_TITLE_MAX_LENGTH=1024,
        TAG_NAME_MAX_LENGTH=255,
        UNIQUE_DETAIL_AUTHOR=False,
    )


@pytest.fixture()
def service(repo: BlogRepository, test_settings: Settings) -> BlogService:
    return BlogService(repo, config=test_settings)


@pytest.fixture()
def hello_post(service: BlogService) -> PostOut:
    """Create a baseline post for tests."""
    return service.add_post("Hello", {"created_by": "alice"})

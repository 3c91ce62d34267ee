"""Tests for the session helpers and table creation in blog_board.db.session."""

from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import Session

import blog_board.db.session as db_session_module
from blog_board.db.session import DETAIL_AUTHOR_INDEX, create_tables, session_scope
from blog_board.models import Post
from blog_board.services import open_blog_service


def _detail_indexes(engine) -> dict[str, bool]:
    return {ix["name"]: bool(ix["unique"]) for ix in inspect(engine).get_indexes("post_detail")}


def test_create_tables_adds_author_index_only_when_enabled(tmp_path) -> None:
    plain = create_engine(f"sqlite:///{tmp_path / 'plain.db'}")
    unique = create_engine(f"sqlite:///{tmp_path / 'unique.db'}")
    try:
        create_tables(plain, unique_detail_author=False)
        create_tables(unique, unique_detail_author=True)

        assert DETAIL_AUTHOR_INDEX not in _detail_indexes(plain)
        assert _detail_indexes(unique)[DETAIL_AUTHOR_INDEX] is True
    finally:
        plain.dispose()
        unique.dispose()


def test_session_scope_closes_session(engine, monkeypatch) -> None:
    opened: list[Session] = []

    def factory() -> Session:
        session = Session(bind=engine, autoflush=False)
        opened.append(session)
        return session

    monkeypatch.setattr(db_session_module, "SessionLocal", factory)

    with session_scope() as db:
        assert db is opened[0]
        db.add(Post(title="Pending"))
        assert db.new

    assert not opened[0].new
    assert not opened[0].in_transaction()


def test_open_blog_service_commits_through_its_own_session(engine, db_session, monkeypatch) -> None:
    opened: list[Session] = []

    def factory() -> Session:
        session = Session(bind=engine, autoflush=False)
        opened.append(session)
        return session

    monkeypatch.setattr(db_session_module, "SessionLocal", factory)

    with open_blog_service() as service:
        post = service.add_post("Scoped", {"created_by": "alice"})
        instance = opened[0].get(Post, post.id)
        assert instance in opened[0]

    assert instance not in opened[0]
    assert db_session.get(Post, post.id).title == "Scoped"

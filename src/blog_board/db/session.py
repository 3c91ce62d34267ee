"""Database session configuration."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from blog_board.core.settings import settings

# Unique index backing the UNIQUE_DETAIL_AUTHOR variant. It is not part of the
# metadata because it only exists when the variant is switched on.
DETAIL_AUTHOR_INDEX = "uq_post_detail_created_by"


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """Turn on foreign key enforcement so ON DELETE CASCADE applies under SQLite."""
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Ensure model modules are imported so that metadata is populated when create_all runs.
import blog_board.models  # noqa: E402,F401

engine = create_engine(
    settings.effective_database_url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def session_scope() -> Iterator[Session]:
    """Open a session from ``SessionLocal`` and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_detail_author_index(bind: Engine | None = None) -> None:
    """Make ``post_detail.created_by`` unique at the database level."""
    with (bind or engine).begin() as conn:
        conn.execute(
            text(
                f"CREATE UNIQUE INDEX IF NOT EXISTS {DETAIL_AUTHOR_INDEX} "
                "ON post_detail (created_by)"
            )
        )


def drop_detail_author_index(bind: Engine | None = None) -> None:
    """Remove the ``created_by`` unique index if present."""
    with (bind or engine).begin() as conn:
        conn.execute(text(f"DROP INDEX IF EXISTS {DETAIL_AUTHOR_INDEX}"))


def create_tables(bind: Engine | None = None, *, unique_detail_author: bool | None = None) -> None:
    """Create all database tables.

    The ``created_by`` unique index is added as well when the author
    uniqueness variant is on (the configured setting unless overridden).
    """
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    if unique_detail_author is None:
        unique_detail_author = settings.unique_detail_author
    if unique_detail_author:
        create_detail_author_index(bind)

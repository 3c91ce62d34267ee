"""The Alembic revisions build the same tables as the ORM metadata."""

from sqlalchemy import create_engine, inspect

from blog_board.core.settings import settings
from blog_board.db.session import DETAIL_AUTHOR_INDEX, Base
from blog_board.scripts.migrate import build_config, run_upgrade_head


def test_upgrade_head_creates_schema(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "unique_detail_author", False)
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    run_upgrade_head(url)

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names()) - {"alembic_version"}
        assert tables == set(Base.metadata.tables)
        for name, table in Base.metadata.tables.items():
            columns = {column["name"] for column in inspector.get_columns(name)}
            assert columns == set(table.c.keys())
        uniques = inspector.get_unique_constraints("post_tag")
        assert any(set(u["column_names"]) == {"post_id", "tag_id"} for u in uniques)
        assert DETAIL_AUTHOR_INDEX not in {ix["name"] for ix in inspector.get_indexes("post_detail")}
    finally:
        engine.dispose()


def test_upgrade_head_indexes_detail_author_when_enabled(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "unique_detail_author", True)
    url = f"sqlite:///{tmp_path / 'unique_author.db'}"
    run_upgrade_head(url)

    engine = create_engine(url)
    try:
        indexes = {ix["name"]: ix for ix in inspect(engine).get_indexes("post_detail")}
        assert indexes[DETAIL_AUTHOR_INDEX]["column_names"] == ["created_by"]
        assert indexes[DETAIL_AUTHOR_INDEX]["unique"]
    finally:
        engine.dispose()


def test_build_config_defaults_to_effective_database_url(monkeypatch) -> None:
    monkeypatch.setattr(settings, "database_url", "sqlite:///./configured.db")
    monkeypatch.setattr(settings, "use_testing_database", False)

    cfg = build_config()

    assert cfg.get_main_option("sqlalchemy.url") == "sqlite:///./configured.db"

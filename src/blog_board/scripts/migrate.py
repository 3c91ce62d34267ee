# src/blog_board/scripts/migrate.py
"""Upgrade the configured database to the latest Alembic revision."""
from __future__ import annotations

import logging
import os

from alembic import command
from alembic.config import Config

from blog_board.core.settings import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")
)


def build_config(database_url: str | None = None) -> Config:
    """Return an Alembic config pointing at the project's migrations folder."""
    cfg = Config(os.path.join(MIGRATIONS_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    cfg.set_main_option("sqlalchemy.url", database_url or settings.effective_database_url)
    return cfg


def run_upgrade_head(database_url: str | None = None) -> None:
    """Apply every pending migration."""
    cfg = build_config(database_url)
    logger.info("Upgrading %s to head", cfg.get_main_option("sqlalchemy.url"))
    command.upgrade(cfg, "head")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_upgrade_head()

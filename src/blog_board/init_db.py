"""Create the blog tables directly from the ORM metadata."""
import logging

from blog_board.db.session import create_tables, engine

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables(engine)
    logger.info("Created tables on %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    print("Database initialized.")

"""Create every table directly from the ORM metadata."""

import logging

from mailroom.core.logging import configure_logging
from mailroom.db.session import create_tables

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()
    logger.info("Database initialized.")


if __name__ == "__main__":
    configure_logging()
    init_db()

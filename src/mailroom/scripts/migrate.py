"""Apply Alembic migrations to the configured database."""
from __future__ import annotations

import argparse
import logging
import os

from alembic import command
from alembic.config import Config

from mailroom.core.logging import configure_logging
from mailroom.core.settings import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")
)


def build_config(url: str | None = None) -> Config:
    """Return an Alembic config pointed at the project's migrations folder."""
    cfg = Config(os.path.join(MIGRATIONS_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    cfg.set_main_option("sqlalchemy.url", url or settings.effective_database_url)
    return cfg


def run_upgrade(revision: str = "head", url: str | None = None) -> None:
    """Upgrade the database schema to ``revision``."""
    logger.info("Upgrading database to %s", revision)
    command.upgrade(build_config(url), revision)


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply database migrations")
    parser.add_argument("--revision", default="head", help="Target revision (default: head)")
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    args = parser.parse_args()

    configure_logging()
    run_upgrade(args.revision, args.url)


if __name__ == "__main__":
    main()

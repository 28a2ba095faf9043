"""Logging setup for scripts and embedding applications."""

import logging

from mailroom.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging using the configured level.

    Args:
        level: Optional level name overriding ``LOG_LEVEL``.
    """
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )

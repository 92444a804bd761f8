"""Logging setup for applications serving JSON:API create endpoints."""

from __future__ import annotations

import logging

from jsonapi_compound.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the ``jsonapi_compound`` logger from settings or ``level``."""
    level_name = (level or get_settings().log_level).upper()
    logger = logging.getLogger("jsonapi_compound")
    logger.setLevel(level_name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

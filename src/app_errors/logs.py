from __future__ import annotations

import sys

from loguru import logger

from .config import get_settings


def setup_logging(level: str | None = None) -> int:
    """Route loguru output to stderr at *level* (defaults to settings).

    Returns the id of the installed sink.
    """

    logger.remove()
    return logger.add(sys.stderr, level=level or get_settings().log_level)

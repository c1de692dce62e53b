"""
Logging setup
Console logging plus optional rotating file log
"""

import logging
from logging.handlers import RotatingFileHandler

from datachat.core.config import settings

__all__ = ["get_logger"]

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str = "datachat") -> logging.Logger:
    """Return a configured logger. Safe to call multiple times (won't duplicate handlers).

    Configurable via settings:
    - LOG_LEVEL: default INFO
    - LOG_FILE: optional path to enable rotating file logging
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    fmt = logging.Formatter(LOG_FORMAT)

    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    logger.addHandler(sh)

    if settings.LOG_FILE:
        try:
            fh = RotatingFileHandler(settings.LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
            fh.setFormatter(fmt)
            logger.addHandler(fh)
        except OSError:
            # Keep console logging when the file can't be opened
            logger.exception("Failed to create file log handler for %s", settings.LOG_FILE)

    return logger

"""Logging setup for the zsounds package logger."""

import logging

from zsounds.core.config import get_settings

PACKAGE_LOGGER = "zsounds"
LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Hosts call this once at startup. ``level`` defaults to
    ``Settings.log_level``. Only the first call adds a handler; later calls
    just update the level.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    level_name = level or get_settings().log_level
    logger.setLevel(getattr(logging, level_name.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
        # Prevent duplicate records through the root logger
        logger.propagate = False

    return logger

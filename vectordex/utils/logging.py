"""
Logging utilities for vectordex.

Every module logger is a child of the ``vectordex`` logger, so handlers
and level are configured in one place:

    >>> setup_logger(level="DEBUG")
    >>> logger = get_logger(__name__)   # e.g. "vectordex.core.database"
"""

import logging
import sys
from typing import Optional


ROOT_LOGGER = "vectordex"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_configured = False


def _parse_level(level: str) -> int:
    name = level.upper()
    if name not in _LEVELS:
        raise ValueError(
            f"Unknown log level: {level}. Available: {', '.join(_LEVELS)}"
        )
    return getattr(logging, name)


def setup_logger(
    level: str = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the ``vectordex`` logger.

    Replaces any handlers from an earlier call, so it is safe to call
    again with a new level.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
        log_file: Optional file to log to as well as stdout

    Returns:
        The ``vectordex`` logger

    Raises:
        ValueError: If the level is unknown
    """
    global _configured

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(_parse_level(level))
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    _configured = True
    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Get a logger in the ``vectordex`` namespace.

    Names outside the namespace are nested under it. The first call
    configures the ``vectordex`` logger with defaults if ``setup_logger``
    hasn't run yet.
    """
    if not _configured:
        setup_logger()

    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)

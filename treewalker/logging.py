"""Logging utilities for TreeWalker.

Thin stdlib logging wrapper. The library only emits records; handlers are
installed by applications (or by :func:`configure_logging` for the demo CLI).
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

_LOGGER_NAME = "treewalker"
_FORMAT = "%(levelname)s %(name)s: %(message)s"

__all__ = [
    "get_logger",
    "configure_logging",
]


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or a child of it when ``name`` is given."""
    if name is None:
        return logging.getLogger(_LOGGER_NAME)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def configure_logging(verbosity: int = 0, *, stream: Optional[TextIO] = None) -> logging.Logger:
    """Configure the package logger for command line use.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG
        stream: Destination stream (defaults to stderr)

    Returns:
        The configured package logger
    """
    logger = get_logger()
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logger.setLevel(level)

    for h in list(logger.handlers):
        if not isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    return logger

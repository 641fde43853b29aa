"""Logging helpers for the prols CLI."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "prols"


def configure_logging(debug: bool = False) -> logging.Logger:
    """Configure and return the ``prols`` logger writing to stderr."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    level = logging.DEBUG if debug else logging.WARNING
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt="%(asctime)s [%(levelname)s] %(message)s"))
    handler.setLevel(level)
    logger.addHandler(handler)

    logger.propagate = False
    return logger

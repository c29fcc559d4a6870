"""Logging helpers for the scaffold generator."""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER_NAME = "scaffold"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Attach a single console handler to the scaffold logger hierarchy."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # CLI may be invoked several times in one process (tests)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[scaffold] %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger

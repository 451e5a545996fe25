"""Logging setup.

Modules log through ``logging.getLogger(__name__)``; entry points
(API, CLI, eval) call :func:`setup_logging` once.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER = "copiloto"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a single stderr handler to the package logger.

    Args:
        level: Optional log level string (e.g. "DEBUG"). If omitted, keeps existing.

    Returns:
        The package logger.
    """

    logger = logging.getLogger(ROOT_LOGGER)
    logger.propagate = False

    if level is not None:
        logger.setLevel(level.upper())
    elif logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)

    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(
            logging.Formatter(fmt="%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)

    return logger


def preview(text: str, limit: int = 80) -> str:
    text = (text or "").replace("\n", " ")
    return text if len(text) <= limit else text[:limit] + "..."

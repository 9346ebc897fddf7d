"""Logging setup for the ``image-upload`` logger hierarchy.

Every module logs through a child of ``image-upload`` (``image-upload.cli``,
``image-upload.storage``, ...). Only the base logger owns a handler; children
propagate to it and inherit its level unless given their own.
"""

import os
import sys
import logging
from typing import Optional, Union


BASE_LOGGER = "image-upload"

FORMATS = {
    "structured": (
        "%(asctime)s | %(name)s | %(levelname)-8s | "
        "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s"
    ),
    "simple": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}


def _resolve_level(level: Union[int, str, None]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName((level or os.getenv("LOG_LEVEL", "INFO")).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Union[int, str, None] = None) -> logging.Logger:
    """
    Attach the stdout handler to the base logger and set its level.

    Safe to call repeatedly: the handler is added once, the level is
    reapplied every time.

    Args:
        level: Level name or number (defaults to LOG_LEVEL, then INFO)

    Environment Variables:
        LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
        LOG_FORMAT: "structured" (default) or "simple"; read when the
            handler is first created
    """
    base = logging.getLogger(BASE_LOGGER)
    base.setLevel(_resolve_level(level))

    if not base.handlers:
        format_type = os.getenv("LOG_FORMAT", "structured").lower()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                FORMATS.get(format_type, FORMATS["structured"]),
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        base.addHandler(handler)

    base.propagate = False
    return base


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``image-upload`` or one of its children, configuring on first use."""
    if not logging.getLogger(BASE_LOGGER).handlers:
        configure_logging()

    if not name or name == BASE_LOGGER:
        return logging.getLogger(BASE_LOGGER)
    if not name.startswith(BASE_LOGGER + "."):
        name = f"{BASE_LOGGER}.{name}"
    return logging.getLogger(name)

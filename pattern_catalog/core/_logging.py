"""Logging configuration.

Diagnostics go to stderr so that stdout carries narration only. The level
comes from the command line, then the ``PATTERN_CATALOG_LOG_LEVEL``
environment variable, then WARNING.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from ._errors import InvalidArgument

__all__ = [
    "LOG_FORMAT",
    "DATE_FORMAT",
    "LOG_LEVEL_ENV",
    "LOG_LEVELS",
    "resolve_log_level",
    "configure_logging",
]

LOG_FORMAT = "[%(asctime)s] [%(levelname)-5s] [%(name)s:%(lineno)d] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL_ENV = "PATTERN_CATALOG_LOG_LEVEL"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

logger = logging.getLogger(__name__)


def resolve_log_level(explicit: Optional[str] = None) -> str:
    """Return the effective level name.

    Raises:
        InvalidArgument: if the chosen name is not a logging level.
    """
    level = (explicit or os.getenv(LOG_LEVEL_ENV) or "WARNING").upper()
    if level not in LOG_LEVELS:
        source = "--log-level" if explicit else LOG_LEVEL_ENV
        raise InvalidArgument(
            f"Unknown log level: {level}",
            [f"Use one of: {', '.join(LOG_LEVELS)}"],
            {"operation": "resolve_log_level", "source": source},
        )
    return level


def configure_logging(level: Optional[str] = None) -> None:
    """Install the stderr handler on the root logger."""
    resolved = resolve_log_level(level)
    logging.basicConfig(level=resolved, format=LOG_FORMAT, datefmt=DATE_FORMAT, stream=sys.stderr)
    logging.getLogger().setLevel(resolved)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("logging configured at %s", resolved)

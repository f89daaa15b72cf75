"""Central logging setup for the command line entry points."""

from __future__ import annotations

import logging
import os

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: str | None = None,
    *,
    default: str = "INFO",
    format: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATEFMT,
) -> logging.Logger:
    """Configure logging for a game run.

    Args:
        level: Optional explicit log level.  Falls back to the
            ``PENGUINS_LOG_LEVEL`` env var, then ``default``.
        default: Level used when neither of the above is set.
        format: Log format string.
        datefmt: Date format string.

    Returns:
        The package logger (``slidingpenguins``).
    """
    raw_level = level if level is not None else os.getenv("PENGUINS_LOG_LEVEL")
    resolved_level = (raw_level or default).upper()
    logging.basicConfig(level=resolved_level, format=format, datefmt=datefmt)

    app_logger = logging.getLogger("slidingpenguins")
    app_logger.setLevel(resolved_level)
    app_logger.debug("Logging configured at %s", resolved_level)
    return app_logger

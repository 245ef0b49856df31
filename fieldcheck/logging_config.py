"""
Logging configuration for fieldcheck.

Library modules only create loggers with ``get_logger(__name__)``;
applications that want fieldcheck's format call ``configure_logging`` once.

Format: 2026-01-06T14:05:52Z [source] LEVEL message

Environment Variables:
    LOG_LEVEL: Set to "DEBUG", "TRACE", or "INFO" (default)
               - INFO: Warnings about unknown or misconfigured rules
               - DEBUG: Schema diagnostics such as fields without valid locations
               - TRACE: Every rule dispatched onto a chain

Usage:
    from fieldcheck.logging_config import configure_logging, get_logger

    configure_logging(source="api")
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import os
import sys
import time

# Custom TRACE level for very verbose diagnostics
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def _trace(self: logging.Logger, message: object, *args: object, **kw: object) -> None:
    """Log a message at TRACE level (5)."""
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kw)  # type: ignore[arg-type]


logging.Logger.trace = _trace  # type: ignore[attr-defined]


class ISO8601Formatter(logging.Formatter):
    """Formatter with second-precision ISO8601 timestamps in UTC.

    Output format: 2026-01-06T14:05:52Z [source] LEVEL message
    """

    converter = time.gmtime

    def __init__(self, source: str = "fieldcheck"):
        self.source = source
        super().__init__(fmt=f"%(asctime)s [{source}] %(levelname)s %(message)s", datefmt="%Y-%m-%dT%H:%M:%SZ")


def _level_from_env(debug: bool | None) -> int:
    log_level_env = os.getenv("LOG_LEVEL", "").upper()
    if log_level_env == "TRACE":
        return TRACE
    if log_level_env == "DEBUG" or debug:
        return logging.DEBUG
    return logging.INFO


def configure_logging(
    source: str = "fieldcheck",
    level: int | None = None,
    debug: bool | None = None,
) -> logging.Logger:
    """Configure the fieldcheck logger hierarchy.

    Args:
        source: Source identifier for log messages
        level: Logging level (defaults to INFO, or DEBUG/TRACE from LOG_LEVEL env var)
        debug: Enable debug mode (overrides level to DEBUG)

    Returns:
        The configured "fieldcheck" logger
    """
    if level is None:
        level = _level_from_env(debug)

    package_logger = logging.getLogger("fieldcheck")
    package_logger.setLevel(level)

    # Clear existing handlers to avoid duplicates on repeated calls
    package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ISO8601Formatter(source=source))

    package_logger.addHandler(handler)
    package_logger.propagate = False

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)

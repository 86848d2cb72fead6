"""Logging helpers: TRACE level registration and root logger setup."""

import logging
from typing import Any

# Below DEBUG; used for per-stage query pipeline output
TRACE_LEVEL = 5

VERBOSE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def add_trace_level() -> None:
    """Register the TRACE level name and a ``Logger.trace`` method."""
    logging.addLevelName(TRACE_LEVEL, "TRACE")

    def trace(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, message, args, **kwargs)

    logging.Logger.trace = trace  # type: ignore[attr-defined]


def get_logger(name: str) -> logging.Logger:
    """Get a logger with trace support."""
    if not hasattr(logging.Logger, "trace"):
        add_trace_level()

    return logging.getLogger(name)


def configure_logging(verbose: bool = False, trace: bool = False) -> int:
    """
    Configure root logging for an application embedding the task engine.

    Args:
        verbose: Log at DEBUG with logger names
        trace: Log at TRACE, including query pipeline stages

    Returns:
        The level that was applied
    """
    add_trace_level()

    if trace:
        level = TRACE_LEVEL
        logging.basicConfig(level=level, format=VERBOSE_FORMAT)
        logging.getLogger("aiosqlite").setLevel(logging.DEBUG)
    elif verbose:
        level = logging.DEBUG
        logging.basicConfig(level=level, format=VERBOSE_FORMAT)
        # aiosqlite logs every statement at DEBUG
        logging.getLogger("aiosqlite").setLevel(logging.INFO)
    else:
        level = logging.INFO
        logging.basicConfig(level=level, format=DEFAULT_FORMAT)
        logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    return level

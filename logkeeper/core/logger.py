"""Diagnostics logging for logkeeper itself.

The package reports its own problems (mail failures, retention sweep
errors, fatal exits) through the standard library ``logging`` module.
These diagnostics always land on standard error, never in the managed
log file, so a broken file cannot hide the report about it.

Features:
    - Single ``logkeeper`` diagnostics logger writing to stderr
    - Handler follows ``sys.stderr`` replacement (test capture, daemons)
    - No propagation to the root logger (no duplicates in host apps)
    - Context string helper for consistent diagnostic messages

Author: Odiseo
Created: 2025-10-18
Version: 2.1.0
"""

import logging
import sys
from typing import Any, TextIO

_ROOT_NAME = "logkeeper"
_LOG_FORMAT_SIMPLE = "%(asctime)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_DIAGNOSTICS_LOGGER: logging.Logger | None = None


class _StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is at emit time."""

    def __init__(self) -> None:
        super().__init__()

    @property
    def stream(self) -> TextIO:  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, value: TextIO) -> None:
        # Always resolved dynamically
        pass


def setup_diagnostics(level: str = "INFO") -> logging.Logger:
    """Configure the ``logkeeper`` diagnostics logger.

    Safe to call more than once; the stderr handler is installed only on
    the first call, later calls just change the level.

    Args:
        level: Diagnostics level (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    Returns:
        The configured ``logkeeper`` logger.

    Example:
        setup_diagnostics("DEBUG")  # also show flush/rotation details
    """
    global _DIAGNOSTICS_LOGGER

    root = logging.getLogger(_ROOT_NAME)
    if _DIAGNOSTICS_LOGGER is None:
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT_SIMPLE, datefmt=_DATE_FORMAT))
        root.addHandler(handler)
        root.propagate = False
        _DIAGNOSTICS_LOGGER = root

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a diagnostics logger for a logkeeper module.

    Args:
        name: Logger name (typically ``__name__`` of calling module).

    Returns:
        Logger under the ``logkeeper`` hierarchy.

    Example:
        from logkeeper.core.logger import get_logger

        logger = get_logger(__name__)
        logger.warning("Unable to delete old file logs/app_2024-01-01.log")
    """
    if _DIAGNOSTICS_LOGGER is None:
        setup_diagnostics()
    if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + "."):
        name = f"{_ROOT_NAME}.{name}"
    return logging.getLogger(name)


def log_context(operation: str, **kwargs: Any) -> str:
    """Format a context string for a diagnostic message.

    Args:
        operation: Operation name (e.g., "rotate", "sendmail").
        **kwargs: Additional context key-value pairs.

    Returns:
        Formatted context string.

    Example:
        msg = log_context("rotate", path="logs/log.log", size=1024)
        # rotate (path=logs/log.log, size=1024)
    """
    if not kwargs:
        return operation
    extra = ", ".join(f"{k}={v}" for k, v in kwargs.items())
    return f"{operation} ({extra})"

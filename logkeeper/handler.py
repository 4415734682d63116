"""Standard library ``logging`` bridge.

``LogKeeperHandler`` forwards records from ``logging`` loggers into a
``LogKeeper`` so third-party libraries end up in the same rotated file.
The record's own ``pathname``/``lineno`` is used as the call site.

Example:
    import logging
    from logkeeper import LogKeeperHandler

    logging.getLogger("urllib3").addHandler(LogKeeperHandler(keeper))
"""

from __future__ import annotations

import logging

from logkeeper.core.levels import Level
from logkeeper.keeper import LogKeeper


def level_for(levelno: int) -> Level:
    """Map a ``logging`` level number onto a logkeeper level."""
    if levelno >= logging.CRITICAL:
        return Level.FATAL
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARN
    if levelno >= logging.INFO:
        return Level.INFO
    return Level.DEBUG


class LogKeeperHandler(logging.Handler):
    """Handler writing ``logging`` records through a ``LogKeeper``.

    CRITICAL records get the FATAL tag but do not terminate the process.

    Attributes:
        keeper: Target logger; the process-wide default when None.
    """

    def __init__(self, keeper: LogKeeper | None = None, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.keeper = keeper

    def emit(self, record: logging.LogRecord) -> None:
        try:
            keeper = self.keeper
            if keeper is None:
                from logkeeper.shared import get_default

                keeper = get_default()
            keeper.emit(
                level_for(record.levelno),
                self.format(record),
                call_site=(record.pathname, record.lineno),
            )
        except Exception:
            self.handleError(record)

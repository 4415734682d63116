"""Log levels and their fixed header tags."""

from __future__ import annotations

from enum import IntEnum

from logkeeper.core.exceptions import InvalidLevelError


class Level(IntEnum):
    """Severity levels, ordered so that comparison gates the threshold.

    Attributes:
        DEBUG: Diagnostic detail.
        INFO: Normal operation.
        WARN: Unexpected but handled.
        ERROR: Operation failed.
        FATAL: Unrecoverable; the process terminates after logging.
    """

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4

    @property
    def tag(self) -> bytes:
        """Bracketed label written into every record header."""
        return _TAGS[self]

    @classmethod
    def parse(cls, value: Level | int | str) -> Level:
        """Convert a level, number or name into a ``Level``.

        Args:
            value: ``Level`` member, its integer value, or its name
                (case-insensitive; ``WARNING`` is accepted for ``WARN``).

        Returns:
            The matching level.

        Raises:
            InvalidLevelError: If the value names no level.
        """
        if isinstance(value, str):
            name = value.strip().upper()
            if name == "WARNING":
                name = "WARN"
            try:
                return cls[name]
            except KeyError:
                raise InvalidLevelError(f"Invalid log level: {value!r}") from None
        try:
            return cls(value)
        except ValueError:
            raise InvalidLevelError(f"Invalid log level: {value!r}") from None


_TAGS = {level: f"[{level.name}]".encode("ascii") for level in Level}

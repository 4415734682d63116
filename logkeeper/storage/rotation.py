"""Rotation engine for the active log file.

Owns the open file, its buffered writer, the accumulated size and the
day stamp of the file. The engine is not synchronized itself: every
method must be called with the owning ``LogKeeper`` lock held.

States:
    - No file open: the next ``prepare`` opens (or reopens) ``path``.
    - File open: records are appended; ``prepare`` rotates when the
      record's day differs from the file's day, or when the record would
      bring the file to ``max_size``.

Rotated files are renamed ``<base>_<YYYY-MM-DD><ext>``, with ``_<N>``
inserted before the extension when that name is taken.

Author: Odiseo
Version: 2.1.0
"""

from __future__ import annotations

import io
import os
import re
import time
from collections.abc import Callable, Iterator
from itertools import chain
from pathlib import Path

from logkeeper.core.exceptions import RotationError
from logkeeper.core.logger import get_logger, log_context
from logkeeper.models.log_config import LoggerConfig

logger = get_logger(__name__)

BUFFER_SIZE = 256 * 1024  # 256 KiB
MAX_BACKUP_ATTEMPTS = 1000
DEFAULT_SUFFIX = ".log"

_DAY_PREFIX = re.compile(rb"\d{4}/\d{2}/\d{2}")


def day_stamp(timestamp: float | None = None) -> bytes:
    """Return the local ``YYYY/MM/DD`` day of ``timestamp`` as bytes."""
    t = time.localtime(time.time() if timestamp is None else timestamp)
    return b"%04d/%02d/%02d" % (t.tm_year, t.tm_mon, t.tm_mday)


def record_day(record: bytes | bytearray | memoryview) -> bytes:
    """Day stamp of a formatted record.

    Formatted records start with ``YYYY/MM/DD``. Raw writes that do not
    are attributed to the current day.
    """
    prefix = bytes(record[:10])
    if _DAY_PREFIX.fullmatch(prefix):
        return prefix
    return day_stamp()


def split_log_path(path: str) -> tuple[str, str]:
    """Split ``path`` into base name and suffix.

    Example:
        split_log_path("logs/app.log")  # ("logs/app", ".log")
        split_log_path("logs/app")      # ("logs/app", ".log")
    """
    base, ext = os.path.splitext(path)
    return base, ext or DEFAULT_SUFFIX


class RotationEngine:
    """Open/rotate state machine for one log file.

    Attributes:
        config: Live logger configuration (``path``, ``max_size``).
        size: Bytes in the open file (pre-existing size included).
        created: Day stamp of the open file.
        before_close: Called with the file path after the final flush
            of a rotation and before the file is closed.
    """

    def __init__(
        self,
        config: LoggerConfig,
        before_close: Callable[[str], None] | None = None,
    ) -> None:
        self.config = config
        self.before_close = before_close
        self.size = 0
        self.created = b""
        self.writer: io.BufferedWriter | None = None
        self._set_path(config.path)

    def _set_path(self, path: str) -> None:
        self.path = path
        self.base, self.suffix = split_log_path(path)

    @property
    def is_open(self) -> bool:
        return self.writer is not None

    @property
    def directory(self) -> str:
        return os.path.dirname(self.path) or "."

    def open(self, now: float | None = None) -> None:
        """Open ``path`` for appending, adopting an existing file's size and day.

        Raises:
            RotationError: If the directory or file cannot be created/opened.
        """
        try:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            try:
                st = os.stat(self.path)
            except FileNotFoundError:
                size, created = 0, day_stamp(now)
            else:
                size, created = st.st_size, day_stamp(st.st_mtime)
            raw = open(self.path, "ab", buffering=0)
        except OSError as e:
            raise RotationError(
                f"Cannot open log file {self.path}: {e}", path=self.path
            ) from e

        self.writer = io.BufferedWriter(raw, buffer_size=BUFFER_SIZE)
        self.size = size
        self.created = created
        logger.debug(log_context("open", path=self.path, size=size, day=created.decode()))

    def _backup_candidates(self, now: float) -> Iterator[str]:
        stamp = time.strftime("_%Y-%m-%d", time.localtime(now))
        return chain(
            [f"{self.base}{stamp}{self.suffix}"],
            (f"{self.base}{stamp}_{i}{self.suffix}" for i in range(MAX_BACKUP_ATTEMPTS)),
        )

    def backup_name(self, now: float | None = None) -> str:
        """First unused backup file name for a rotation at ``now``.

        Raises:
            RotationError: If every candidate name is already taken.
        """
        for candidate in self._backup_candidates(time.time() if now is None else now):
            if not os.path.exists(candidate):
                return candidate
        raise RotationError(
            f"No free backup name for {self.path} after {MAX_BACKUP_ATTEMPTS} attempts",
            path=self.path,
        )

    def rotate(self, now: float | None = None) -> str | None:
        """Close and rename the open file, then open a fresh one.

        When no file is open this only opens ``path``.

        Returns:
            Path of the renamed backup, or None if nothing was rotated.

        Raises:
            RotationError: If flushing, renaming or reopening fails.
        """
        if now is None:
            now = time.time()
        backup = None
        if self.writer is not None:
            try:
                self.flush_sync()
                if self.before_close is not None:
                    self.before_close(self.path)
                self.writer.close()
                self.writer = None
                backup = self.backup_name(now)
                os.rename(self.path, backup)
            except OSError as e:
                raise RotationError(
                    f"Cannot rotate log file {self.path}: {e}", path=self.path
                ) from e
            self.size = 0
            logger.debug(log_context("rotate", path=self.path, backup=backup))
        self.open(now)
        return backup

    def prepare(self, record: bytes | bytearray | memoryview) -> bool:
        """Make sure ``record`` can be appended to the right file.

        Opens the file if needed. When the record's day differs from the
        file's day, a non-empty file is rotated and the file takes the
        record's day. Then rotates if appending ``record`` would meet or
        exceed ``max_size``. An empty file is never rotated.

        Returns:
            True if the record starts a new day.

        Raises:
            RotationError: If opening or rotating fails.
        """
        day = record_day(record)
        if self.writer is None:
            self.open()

        day_changed = False
        if day != self.created:
            if self.size > 0:
                self.rotate()
            self.created = day
            day_changed = True

        if self.size > 0 and self.size + len(record) >= self.config.max_size:
            self.rotate()

        return day_changed

    def append(self, record: bytes | bytearray | memoryview) -> int:
        """Append ``record`` to the buffered writer and account its size.

        Raises:
            RotationError: If no file is open.
            OSError: If the write fails.
        """
        if self.writer is None:
            raise RotationError(f"Log file {self.path} is not open", path=self.path)
        n = self.writer.write(record)
        self.size += n
        return n

    def flush_sync(self) -> None:
        """Flush buffered data and sync the file to disk; no-op when closed."""
        if self.writer is not None:
            self.writer.flush()
            os.fsync(self.writer.fileno())

    def close(self) -> None:
        """Flush and close the open file, returning to the no-file state."""
        if self.writer is None:
            return
        try:
            self.flush_sync()
        finally:
            self.writer.close()
            self.writer = None

    def set_path(self, path: str) -> None:
        """Switch to a new target path; the next write opens it."""
        self.close()
        self._set_path(path)

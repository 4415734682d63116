"""Record formatter for logkeeper.

Renders ``YYYY/MM/DD HH:MM:SS [LEVEL] [file:line] message\\n`` into a
pooled ``RecordBuffer``. Numeric header fields are written digit by
digit into the buffer's scratch array instead of going through string
formatting, and the finished header is copied into the line in one go.

The first ten bytes of every record are the ``YYYY/MM/DD`` day stamp;
the rotation engine reads them to detect day changes.

Version: 2.0.0
"""

from __future__ import annotations

import os
import sys
import time
from types import FrameType

from logkeeper.core.levels import Level
from logkeeper.formatting.buffer import RecordBuffer
from logkeeper.models.log_config import LoggerConfig

_SLASH = ord("/")
_SPACE = ord(" ")
_COLON = ord(":")
_CLOSE = ord("]")

_PACKAGE = __name__.split(".")[0]
_UNKNOWN_CALLER = ("???", 1)


def shorten_path(path: str) -> str:
    """Keep at most the last two ``/``-separated segments of ``path``.

    Example:
        shorten_path("/a/b/c/d.py")  # "c/d.py"
    """
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    parts = path.rsplit("/", 2)
    if len(parts) < 3:
        return path
    return f"{parts[1]}/{parts[2]}"


def _in_package(frame: FrameType) -> bool:
    module = frame.f_globals.get("__name__", "")
    return module == _PACKAGE or module.startswith(_PACKAGE + ".")


def find_caller(depth: int = 0) -> tuple[str, int]:
    """Locate the first frame outside the logkeeper package.

    Args:
        depth: Extra frames to skip past the first outside frame, for
            callers that wrap the logging functions in helpers of their own.

    Returns:
        ``(filename, lineno)`` of the call site, or ``("???", 1)`` when
        the stack is too shallow.
    """
    frame: FrameType | None = sys._getframe(1)
    while frame is not None and _in_package(frame):
        frame = frame.f_back
    while frame is not None and depth > 0:
        frame = frame.f_back
        depth -= 1
    if frame is None:
        return _UNKNOWN_CALLER
    return frame.f_code.co_filename, frame.f_lineno


class RecordFormatter:
    """Formats log records for one logger instance.

    Reads ``call_info`` and ``short_path`` from the live configuration
    on every call, so setters take effect on the next record.
    """

    def __init__(self, config: LoggerConfig) -> None:
        self.config = config

    def header(
        self,
        buf: RecordBuffer,
        level: Level,
        depth: int = 0,
        call_site: tuple[str, int] | None = None,
        now: float | None = None,
    ) -> None:
        """Append the record header to ``buf.line``.

        Args:
            buf: Buffer to render into.
            level: Record level.
            depth: Extra stack frames to skip when resolving the caller.
            call_site: Explicit ``(file, line)``; skips stack walking.
            now: Timestamp to render (defaults to the current time).
        """
        t = time.localtime(time.time() if now is None else now)
        temp = buf.temp
        buf.write4(0, t.tm_year)
        temp[4] = _SLASH
        buf.write2(5, t.tm_mon)
        temp[7] = _SLASH
        buf.write2(8, t.tm_mday)
        temp[10] = _SPACE
        buf.write2(11, t.tm_hour)
        temp[13] = _COLON
        buf.write2(14, t.tm_min)
        temp[16] = _COLON
        buf.write2(17, t.tm_sec)
        temp[19] = _SPACE
        tag = level.tag
        end = 20 + len(tag)
        temp[20:end] = tag
        temp[end] = _SPACE
        buf.line += memoryview(temp)[: end + 1]

        if not self.config.call_info:
            return

        filename, lineno = call_site if call_site is not None else find_caller(depth)
        if self.config.short_path:
            filename = shorten_path(filename)
        buf.line += b"["
        buf.line += filename.encode("utf-8", "replace")
        temp[0] = _COLON
        n = buf.write_n(1, lineno)
        temp[n + 1] = _CLOSE
        temp[n + 2] = _SPACE
        buf.line += memoryview(temp)[: n + 3]

    def render(
        self,
        buf: RecordBuffer,
        level: Level,
        message: str,
        depth: int = 0,
        call_site: tuple[str, int] | None = None,
        now: float | None = None,
    ) -> None:
        """Render header and message; the line ends in exactly one newline."""
        self.header(buf, level, depth, call_site, now)
        buf.line += message.encode("utf-8", "replace")
        if not buf.line.endswith(b"\n"):
            buf.line += b"\n"

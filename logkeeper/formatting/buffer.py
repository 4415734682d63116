"""Reusable record buffers and the pool that recycles them.

A record is rendered into a ``RecordBuffer``: header digits go into a
fixed scratch array, the finished line accumulates in ``line``. Buffers
are borrowed from a ``BufferPool`` per record and returned cleared, so
the hot path does not allocate a fresh buffer for every call.

Version: 1.0.0
"""

from __future__ import annotations

import threading

DIGITS = b"0123456789"
SCRATCH_SIZE = 64

# Lines above this size are not kept in the pool after use.
MAX_POOLED_LINE = 64 * 1024


class RecordBuffer:
    """Scratch region plus growable line for one formatted record.

    Attributes:
        temp: Fixed-size scratch array for header digits and separators.
        line: The formatted record being built.
    """

    __slots__ = ("temp", "line")

    def __init__(self) -> None:
        self.temp = bytearray(SCRATCH_SIZE)
        self.line = bytearray()

    def write2(self, i: int, d: int) -> None:
        """Write ``d`` as two digits at ``temp[i:i+2]``."""
        temp = self.temp
        temp[i + 1] = DIGITS[d % 10]
        d //= 10
        temp[i] = DIGITS[d % 10]

    def write4(self, i: int, d: int) -> None:
        """Write ``d`` as four digits at ``temp[i:i+4]``."""
        temp = self.temp
        temp[i + 3] = DIGITS[d % 10]
        d //= 10
        temp[i + 2] = DIGITS[d % 10]
        d //= 10
        temp[i + 1] = DIGITS[d % 10]
        d //= 10
        temp[i] = DIGITS[d % 10]

    def write_n(self, i: int, d: int) -> int:
        """Write ``d`` with as many digits as needed starting at ``temp[i]``.

        Digits are produced right-to-left at the end of the scratch array
        and then moved into place.

        Returns:
            Number of digits written.
        """
        temp = self.temp
        j = len(temp)
        if d == 0:
            j -= 1
            temp[j] = DIGITS[0]
        while d > 0:
            j -= 1
            temp[j] = DIGITS[d % 10]
            d //= 10
        n = len(temp) - j
        temp[i : i + n] = temp[j:]
        return n

    def reset(self) -> None:
        """Drop the current line; the scratch array is overwritten on use."""
        self.line.clear()


class BufferPool:
    """Thread-safe free list of ``RecordBuffer`` objects.

    ``acquire`` hands out any idle buffer (or a new one), ``release``
    clears the buffer before it becomes available again, so no record
    content leaks into a later call. No ordering is guaranteed.
    """

    def __init__(self, max_idle: int = 64) -> None:
        self._free: list[RecordBuffer] = []
        self._lock = threading.Lock()
        self.max_idle = max_idle

    def acquire(self) -> RecordBuffer:
        with self._lock:
            if self._free:
                return self._free.pop()
        return RecordBuffer()

    def release(self, buf: RecordBuffer) -> None:
        oversized = len(buf.line) > MAX_POOLED_LINE
        buf.reset()
        if oversized:
            return
        with self._lock:
            if len(self._free) < self.max_idle:
                self._free.append(buf)

    def __len__(self) -> int:
        with self._lock:
            return len(self._free)

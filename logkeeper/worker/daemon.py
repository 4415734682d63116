"""Periodic flush daemon.

Background thread that flushes the logger's buffered writer to disk on
a fixed interval. The interval is re-read before every wait so
``set_flush_interval`` takes effect after the current wait.

Version: 1.0.0
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from logkeeper.core.logger import get_logger

logger = get_logger(__name__)


class FlushDaemon:
    """Calls ``flush`` every ``interval()`` seconds until stopped."""

    def __init__(self, flush: Callable[[], None], interval: Callable[[], float]) -> None:
        self._flush = flush
        self._interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="logkeeper-flush", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        cycle = 0
        while not self._stop.wait(self._interval()):
            cycle += 1
            try:
                self._flush()
            except Exception:
                logger.error(f"Flush cycle #{cycle} failed", exc_info=True)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Signal the loop to exit and wait for the thread."""
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

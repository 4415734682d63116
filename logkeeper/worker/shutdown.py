"""Signal-triggered graceful shutdown.

One hook serves every logger in the process. Loggers register a flush
callback when they start and unregister on close; the signal handlers
are installed with the first registration and the previous handlers are
restored when the last logger unregisters.

The signal handler itself only records the signal, restores the
previous handlers (one-shot) and wakes a watcher thread. It takes no
lock, so a signal arriving while the main thread is registering or
unregistering cannot deadlock. The watcher runs every registered
callback (log a warning, flush) outside signal context and then calls
``on_exit``.

Version: 3.0.0
"""

from __future__ import annotations

import signal
import threading
from collections.abc import Callable
from typing import Any

from logkeeper.core.logger import get_logger

logger = get_logger(__name__)

SignalCallback = Callable[[signal.Signals], None]


def shutdown_signals() -> list[signal.Signals]:
    """Termination/interrupt signals available on this platform."""
    names = ("SIGTERM", "SIGINT", "SIGHUP", "SIGQUIT")
    return [getattr(signal, name) for name in names if hasattr(signal, name)]


class ShutdownHook:
    """Process-wide listener for termination signals.

    Attributes:
        received: The signal that fired the hook, if any.
    """

    def __init__(self, on_exit: Callable[[], None]) -> None:
        """Initialize the hook.

        Args:
            on_exit: Called on the watcher thread after every registered
                callback has run.
        """
        self._on_exit = on_exit
        # Guards registration state; never taken by the signal handler
        self._lock = threading.Lock()
        self._members: dict[Any, SignalCallback] = {}
        self._previous: dict[signal.Signals, Any] = {}
        self._installed = False
        self._event = threading.Event()
        self._thread: threading.Thread | None = None
        self.received: signal.Signals | None = None

    @property
    def installed(self) -> bool:
        return self._installed

    def __len__(self) -> int:
        with self._lock:
            return len(self._members)

    def register(self, key: Any, on_signal: SignalCallback) -> bool:
        """Add a callback, installing the handlers on first use.

        Args:
            key: Identity of the registrant (used by ``unregister``).
            on_signal: Called with the received signal before exit.

        Returns:
            False if handlers cannot be installed from this thread.
        """
        with self._lock:
            if not self._installed and not self._install():
                return False
            self._members[key] = on_signal
            return True

    def unregister(self, key: Any) -> None:
        """Drop a callback; the last one out restores the previous handlers."""
        with self._lock:
            self._members.pop(key, None)
            if self._members or not self._installed:
                return
            thread, self._thread = self._thread, None
            self._installed = False
            self._restore()
            self._event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(1.0)

    def _install(self) -> bool:
        previous: dict[signal.Signals, Any] = {}
        try:
            for sig in shutdown_signals():
                previous[sig] = signal.signal(sig, self._handle_signal)
        except ValueError:
            # signal.signal only works in the main thread
            for sig, handler in previous.items():
                signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
            logger.debug("Shutdown hook not installed: not in the main thread")
            return False

        self._previous = previous
        self.received = None
        self._event.clear()
        self._installed = True
        self._thread = threading.Thread(
            target=self._watch, name="logkeeper-shutdown", daemon=True
        )
        self._thread.start()
        return True

    def _handle_signal(self, signum: int, frame: Any) -> None:
        if self.received is not None:
            return
        self.received = signal.Signals(signum)
        self._restore()
        self._event.set()

    def _watch(self) -> None:
        self._event.wait()
        sig = self.received
        if sig is not None:
            logger.info(f"Received shutdown signal ({sig.name}). Flushing logs...")
            with self._lock:
                callbacks = list(self._members.values())
            for callback in callbacks:
                try:
                    callback(sig)
                except Exception:
                    logger.error(f"Shutdown flush failed on {sig.name}", exc_info=True)
            self._on_exit()

        # Only reached when on_exit returns (intercepted exit) or on cancel
        with self._lock:
            if self._thread is threading.current_thread():
                self._thread = None
                self._installed = False

    def _restore(self) -> None:
        previous, self._previous = self._previous, {}
        for sig, handler in previous.items():
            try:
                signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
            except ValueError:
                logger.debug(f"Cannot restore handler for {sig.name} from this thread")

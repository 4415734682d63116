"""Logger instance: level entry points, dispatcher and configuration setters.

A ``LogKeeper`` formats records outside its lock, then writes them under
a single per-instance lock that guards the rotation engine (open file,
buffered writer, size, day stamp), the threshold and the configuration.
Background flushing, the shutdown hook and the retention sweep are
started from here.

Lock discipline:
    - Engine state and configuration mutation: always under ``_lock``.
    - Threshold and formatter options (``call_info``, ``short_path``)
      are read without the lock on the hot path; each is a single
      attribute read.
    - The retention sweep gets its arguments under the lock and runs
      without it.

Failures while opening, rotating, writing or flushing the file are
fatal: the error is reported on stderr, buffered data is flushed, the
file is mailed if mail is enabled, and the process exits with status 1.

Author: Odiseo
Created: 2025-10-18
Version: 2.1.0
"""

from __future__ import annotations

import os
import signal
import sys
import threading
from datetime import timedelta
from typing import Any

from logkeeper.clients.notifier import MailNotifier, MailTransport
from logkeeper.core.exceptions import LogConfigError, RotationError
from logkeeper.core.levels import Level
from logkeeper.core.logger import get_logger
from logkeeper.formatting.buffer import BufferPool
from logkeeper.formatting.formatter import RecordFormatter
from logkeeper.models.log_config import LoggerConfig
from logkeeper.models.mail_config import MailConfig
from logkeeper.storage.retention import start_sweep
from logkeeper.storage.rotation import RotationEngine
from logkeeper.worker.daemon import FlushDaemon
from logkeeper.worker.shutdown import ShutdownHook

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1


def _terminate(status: int) -> None:
    """Terminate the process immediately, from any thread."""
    try:
        sys.stderr.flush()
    except (OSError, ValueError):
        pass  # stderr already closed
    os._exit(status)


# One signal hook per process; every logger with handle_signals registers here
_signal_hook = ShutdownHook(on_exit=lambda: _terminate(EXIT_OK))


class RawWriter:
    """File-like handle that writes straight through a ``LogKeeper``.

    Lets other text producers (``print(file=...)``, stream handlers,
    subprocess relays) share the logger's file, rotation and echo.
    """

    def __init__(self, keeper: LogKeeper) -> None:
        self._keeper = keeper

    def write(self, data: str | bytes | bytearray) -> int:
        if isinstance(data, str):
            self._keeper.write(data.encode("utf-8"))
            return len(data)
        return self._keeper.write(data)

    def flush(self) -> None:
        self._keeper.flush()

    def writable(self) -> bool:
        return True


class LogKeeper:
    """Rotating, mail-capable file logger.

    Attributes:
        level: Current threshold; records below it are dropped.

    Example:
        keeper = LogKeeper(LoggerConfig(path="logs/app.log", max_size=10 * 1024 * 1024))
        keeper.info("service started on port", 8080)
        keeper.warnf("retrying %s in %.1fs", "upload", 2.5)
        keeper.close()
    """

    def __init__(
        self,
        config: LoggerConfig | None = None,
        level: Level | int | str = Level.DEBUG,
        mail_transport: MailTransport | None = None,
    ) -> None:
        """Initialize the logger.

        Args:
            config: Logger configuration (defaults apply when None).
            level: Initial threshold.
            mail_transport: Mail delivery function (SMTP when None).

        Raises:
            InvalidLevelError: If ``level`` is not a valid level.
        """
        self._config = (config or LoggerConfig()).model_copy(deep=True)
        self._level = Level.parse(level)
        self._lock = threading.Lock()
        self._pool = BufferPool()
        self._formatter = RecordFormatter(self._config)
        self._notifier = MailNotifier(self._config, mail_transport)
        self._engine = RotationEngine(self._config, before_close=self._notifier.notify)
        self._daemon = FlushDaemon(self.flush, lambda: self._config.flush_interval)
        self._signals_registered = False

        if self._config.mail_enabled and not self._config.file_disabled:
            self._check_mail_config(self._config.mail)

        if not self._config.file_disabled:
            self._start_background()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def _start_background(self) -> None:
        self._daemon.start()
        if self._config.handle_signals and not self._signals_registered:
            self._signals_registered = _signal_hook.register(self, self._flush_for_signal)

    def _flush_for_signal(self, sig: signal.Signals) -> None:
        """Leave an exit record and flush; the shared hook then exits 0."""
        self.warnf("Exit by %s", sig.name)
        self.flush()

    def _check_mail_config(self, mail: MailConfig) -> bool:
        try:
            mail.validate_complete()
        except LogConfigError as e:
            logger.critical(f"Exiting because of error: {e}")
            _terminate(EXIT_FATAL)
            return False
        return True

    def close(self) -> None:
        """Stop background loops, restore signal handlers and close the file."""
        if self._signals_registered:
            _signal_hook.unregister(self)
            self._signals_registered = False
        self._daemon.stop()
        with self._lock:
            try:
                self._engine.close()
            except OSError as e:
                logger.error(f"Failed to close log file {self._engine.path}: {e}")

    def __enter__(self) -> LogKeeper:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Writer / dispatcher
    # ------------------------------------------------------------------
    @staticmethod
    def _echo(data: bytes | bytearray | memoryview) -> None:
        try:
            sys.stderr.write(bytes(data).decode("utf-8", "replace"))
        except (OSError, ValueError):
            pass  # stderr closed; nowhere left to report

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Write one formatted, newline-terminated record.

        The record's first ten bytes should be its ``YYYY/MM/DD`` day;
        they decide day rotation.

        Returns:
            Number of bytes appended to the file (``len(data)`` when file
            output is disabled).
        """
        with self._lock:
            config = self._config
            if not config.console_disabled:
                self._echo(data)
            if config.file_disabled:
                return len(data)
            try:
                if self._engine.prepare(data):
                    start_sweep(
                        self._engine.directory,
                        self._engine.suffix,
                        config.max_storage_days,
                    )
                return self._engine.append(data)
            except (OSError, RotationError) as e:
                if config.console_disabled:
                    self._echo(data)
                self._fatal_exit(e)
                return 0

    def _fatal_exit(self, error: BaseException) -> None:
        """Report, flush, mail and terminate. Caller holds the lock."""
        logger.critical(f"Exiting because of error: {error}")
        try:
            self._engine.flush_sync()
        except OSError as e:
            logger.error(f"Final flush of {self._engine.path} failed: {e}")
        self._notifier.notify(self._engine.path if self._engine.is_open else None)
        _terminate(EXIT_FATAL)

    def flush(self) -> None:
        """Flush buffered records and sync the file; no-op without file output."""
        if self._config.file_disabled:
            return
        with self._lock:
            try:
                self._engine.flush_sync()
            except OSError as e:
                self._fatal_exit(e)

    def writer(self) -> RawWriter:
        """File-like handle for other text-producing components."""
        return RawWriter(self)

    def send_log_mail(self) -> bool:
        """Flush and mail the current log file.

        Returns:
            True if the mail was handed to the transport successfully.
        """
        with self._lock:
            if not self._engine.is_open:
                return self._notifier.notify(None)
            try:
                self._engine.flush_sync()
            except OSError as e:
                self._fatal_exit(e)
                return False
            return self._notifier.notify(self._engine.path)

    # ------------------------------------------------------------------
    # Level API
    # ------------------------------------------------------------------
    def enabled_for(self, level: Level) -> bool:
        return level >= self._level

    def emit(
        self,
        level: Level,
        message: str,
        depth: int = 0,
        call_site: tuple[str, int] | None = None,
    ) -> None:
        """Format and write one record if ``level`` passes the threshold.

        Args:
            level: Record level.
            message: Fully rendered message.
            depth: Extra frames to skip when resolving the call site.
            call_site: Explicit ``(file, line)`` instead of stack walking.
        """
        if not self.enabled_for(level):
            return
        buf = self._pool.acquire()
        try:
            self._formatter.render(buf, level, message, depth=depth, call_site=call_site)
            self.write(buf.line)
        finally:
            self._pool.release(buf)

    def log(self, level: Level, *args: Any, depth: int = 0) -> None:
        """Log ``args`` joined by spaces, like ``print``."""
        if not self.enabled_for(level):
            return
        self.emit(level, " ".join(str(arg) for arg in args), depth)

    def logf(self, level: Level, fmt: str, *args: Any, depth: int = 0) -> None:
        """Log ``fmt % args``."""
        if not self.enabled_for(level):
            return
        if args:
            try:
                message = fmt % args
            except (TypeError, ValueError) as e:
                message = f"{fmt} {args!r} (format error: {e})"
        else:
            message = fmt
        self.emit(level, message, depth)

    def debug(self, *args: Any) -> None:
        self.log(Level.DEBUG, *args)

    def debugf(self, fmt: str, *args: Any) -> None:
        self.logf(Level.DEBUG, fmt, *args)

    def info(self, *args: Any) -> None:
        self.log(Level.INFO, *args)

    def infof(self, fmt: str, *args: Any) -> None:
        self.logf(Level.INFO, fmt, *args)

    def warn(self, *args: Any) -> None:
        self.log(Level.WARN, *args)

    def warnf(self, fmt: str, *args: Any) -> None:
        self.logf(Level.WARN, fmt, *args)

    warning = warn

    def error(self, *args: Any) -> None:
        self.log(Level.ERROR, *args)

    def errorf(self, fmt: str, *args: Any) -> None:
        self.logf(Level.ERROR, fmt, *args)

    def fatal(self, *args: Any) -> None:
        """Log at FATAL, flush and terminate the process."""
        self.log(Level.FATAL, *args)
        self.flush()
        _terminate(EXIT_FATAL)

    def fatalf(self, fmt: str, *args: Any) -> None:
        """Log ``fmt % args`` at FATAL, flush and terminate the process."""
        self.logf(Level.FATAL, fmt, *args)
        self.flush()
        _terminate(EXIT_FATAL)

    # ------------------------------------------------------------------
    # Synchronized setters
    # ------------------------------------------------------------------
    @property
    def level(self) -> Level:
        return self._level

    @property
    def config(self) -> LoggerConfig:
        """Snapshot of the current configuration."""
        with self._lock:
            return self._config.model_copy(deep=True)

    def set_level(self, level: Level | int | str) -> None:
        """Set the threshold.

        Raises:
            InvalidLevelError: If ``level`` is outside DEBUG..FATAL.
        """
        parsed = Level.parse(level)
        with self._lock:
            self._level = parsed

    def set_path(self, path: str) -> None:
        """Switch output to ``path``; the current file is flushed and closed."""
        with self._lock:
            self._config.path = path
            try:
                self._engine.set_path(self._config.path)
            except OSError as e:
                self._fatal_exit(e)

    def set_max_size(self, max_size: int) -> None:
        with self._lock:
            self._config.max_size = max_size

    def set_max_storage_days(self, days: int) -> None:
        """Set the retention window in days.

        Zero means the default window (60 days), as at construction; a
        negative value disables deletion. There is no "expire everything"
        setting.
        """
        with self._lock:
            self._config.max_storage_days = days

    def set_flush_interval(self, interval: float | timedelta) -> None:
        if isinstance(interval, timedelta):
            interval = interval.total_seconds()
        with self._lock:
            self._config.flush_interval = interval

    def set_file_output_disabled(self, disabled: bool) -> None:
        """Turn file output off (flushing and closing the file) or back on."""
        with self._lock:
            self._config.file_disabled = disabled
            if disabled:
                try:
                    self._engine.close()
                except OSError as e:
                    self._fatal_exit(e)
        if not disabled:
            self._start_background()

    def set_console_disabled(self, disabled: bool) -> None:
        with self._lock:
            self._config.console_disabled = disabled

    def set_call_info(self, enabled: bool) -> None:
        with self._lock:
            self._config.call_info = enabled

    def set_short_path(self, enabled: bool) -> None:
        with self._lock:
            self._config.short_path = enabled

    def set_mail_enabled(self, enabled: bool) -> None:
        """Enable or disable log mail; enabling requires complete settings."""
        if enabled and not self._check_mail_config(self._config.mail):
            return
        with self._lock:
            self._config.mail_enabled = enabled

    def set_mail_config(self, mail: MailConfig) -> None:
        with self._lock:
            self._config.mail = mail.model_copy(deep=True)

    def set_mail_recipients(self, recipients: list[str]) -> None:
        with self._lock:
            self._config.mail.recipients = recipients

"""Process-wide default logger and module-level convenience functions.

The default ``LogKeeper`` lives in a single global slot. It is created
once, on first use, from ``LogKeeperSettings`` (environment / .env),
unless ``configure`` installed one explicitly. Independent instances
can always be built directly with ``LogKeeper(...)``.

Example:
    import logkeeper

    logkeeper.configure(LoggerConfig(path="logs/api.log"), level="INFO")
    logkeeper.info("listening on", 8080)
    logkeeper.errorf("upstream %s returned %d", "billing", 502)
"""

from __future__ import annotations

import threading
from datetime import timedelta
from typing import Any

from logkeeper.clients.notifier import MailTransport
from logkeeper.config.settings import LogKeeperSettings
from logkeeper.core.levels import Level
from logkeeper.keeper import LogKeeper, RawWriter
from logkeeper.models.log_config import LoggerConfig
from logkeeper.models.mail_config import MailConfig

_default: LogKeeper | None = None
_default_lock = threading.Lock()


def get_default() -> LogKeeper:
    """Return the default logger, creating it from settings on first use."""
    global _default
    keeper = _default
    if keeper is not None:
        return keeper
    with _default_lock:
        if _default is None:
            settings = LogKeeperSettings()
            _default = LogKeeper(settings.to_logger_config(), level=settings.LOG_LEVEL)
        return _default


def configure(
    config: LoggerConfig | None = None,
    level: Level | int | str = Level.DEBUG,
    mail_transport: MailTransport | None = None,
) -> LogKeeper:
    """Build a logger and install it as the default.

    A previously installed default is closed (flushed) first.
    """
    keeper = LogKeeper(config, level=level, mail_transport=mail_transport)
    set_default(keeper)
    return keeper


def set_default(keeper: LogKeeper | None) -> None:
    """Install ``keeper`` as the default, closing the one it replaces."""
    global _default
    with _default_lock:
        previous, _default = _default, keeper
    if previous is not None and previous is not keeper:
        previous.close()


def reset_default() -> None:
    """Close and forget the default logger."""
    set_default(None)


# -------- Level API


def debug(*args: Any) -> None:
    get_default().log(Level.DEBUG, *args)


def debugf(fmt: str, *args: Any) -> None:
    get_default().logf(Level.DEBUG, fmt, *args)


def info(*args: Any) -> None:
    get_default().log(Level.INFO, *args)


def infof(fmt: str, *args: Any) -> None:
    get_default().logf(Level.INFO, fmt, *args)


def warn(*args: Any) -> None:
    get_default().log(Level.WARN, *args)


def warnf(fmt: str, *args: Any) -> None:
    get_default().logf(Level.WARN, fmt, *args)


warning = warn


def error(*args: Any) -> None:
    get_default().log(Level.ERROR, *args)


def errorf(fmt: str, *args: Any) -> None:
    get_default().logf(Level.ERROR, fmt, *args)


def fatal(*args: Any) -> None:
    get_default().fatal(*args)


def fatalf(fmt: str, *args: Any) -> None:
    get_default().fatalf(fmt, *args)


def flush() -> None:
    get_default().flush()


def writer() -> RawWriter:
    return get_default().writer()


def send_log_mail() -> bool:
    return get_default().send_log_mail()


# -------- Setters


def set_level(level: Level | int | str) -> None:
    get_default().set_level(level)


def set_path(path: str) -> None:
    get_default().set_path(path)


def set_max_size(max_size: int) -> None:
    get_default().set_max_size(max_size)


def set_max_storage_days(days: int) -> None:
    """Zero restores the 60-day default; negative disables deletion."""
    get_default().set_max_storage_days(days)


def set_flush_interval(interval: float | timedelta) -> None:
    get_default().set_flush_interval(interval)


def set_file_output_disabled(disabled: bool) -> None:
    get_default().set_file_output_disabled(disabled)


def set_console_disabled(disabled: bool) -> None:
    get_default().set_console_disabled(disabled)


def set_call_info(enabled: bool) -> None:
    get_default().set_call_info(enabled)


def set_short_path(enabled: bool) -> None:
    get_default().set_short_path(enabled)


def set_mail_enabled(enabled: bool) -> None:
    get_default().set_mail_enabled(enabled)


def set_mail_config(mail: MailConfig) -> None:
    get_default().set_mail_config(mail)


def set_mail_recipients(recipients: list[str]) -> None:
    get_default().set_mail_recipients(recipients)

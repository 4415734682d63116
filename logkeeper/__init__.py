"""Logkeeper - Rotating file logger with retention and log mail.

Provides a process-embedded logger with:
- Buffered, thread-safe file output with stderr echo
- Rotation by calendar day and by size (date-suffixed backups)
- Retention sweep of expired rotated files
- Periodic background flush and flush-on-signal shutdown
- Log mail on rotation, fatal error or explicit request (SMTP)

Architecture:
    - Record formatter rendering into pooled buffers
    - Rotation engine owning the open file
    - Single lock per logger instance
    - Background flush daemon and one-shot shutdown hook
    - Detached retention sweep per day change
    - SMTP mail transport

Modules:
    - core: Levels, exceptions, diagnostics logger
    - config: Pydantic v2 settings (environment / .env)
    - models: Logger and mail configuration models
    - formatting: Record formatter and buffer pool
    - storage: Rotation engine and retention sweeper
    - clients: SMTP transport and mail notifier
    - worker: Flush daemon and shutdown hook

Usage:
    # Package-level default logger (built from environment on first use)
    import logkeeper

    logkeeper.info("worker started, pid", 4242)
    logkeeper.errorf("job %s failed: %s", job_id, err)

    # Independent instance
    from logkeeper import LogKeeper, LoggerConfig

    keeper = LogKeeper(LoggerConfig(path="logs/billing.log", call_info=True))
    keeper.warn("invoice total mismatch")
    keeper.close()

Author: Odiseo
Created: 2025-10-18
Version: 2.0.0
"""

__version__ = "2.0.0"

# Clients
from logkeeper.clients import MailNotifier, SMTPClient, deliver_log_mail

# Configuration
from logkeeper.config import LogKeeperSettings

# Core utilities
from logkeeper.core import (
    InvalidLevelError,
    Level,
    LogConfigError,
    LogKeeperError,
    MailDeliveryError,
    RotationError,
    get_logger,
    setup_diagnostics,
)

# Logger
from logkeeper.handler import LogKeeperHandler
from logkeeper.keeper import LogKeeper, RawWriter

# Models
from logkeeper.models import LoggerConfig, MailConfig

# Default instance and module-level API
from logkeeper.shared import (
    configure,
    debug,
    debugf,
    error,
    errorf,
    fatal,
    fatalf,
    flush,
    get_default,
    info,
    infof,
    reset_default,
    send_log_mail,
    set_call_info,
    set_console_disabled,
    set_default,
    set_file_output_disabled,
    set_flush_interval,
    set_level,
    set_mail_config,
    set_mail_enabled,
    set_mail_recipients,
    set_max_size,
    set_max_storage_days,
    set_path,
    set_short_path,
    warn,
    warnf,
    warning,
    writer,
)

DEBUG = Level.DEBUG
INFO = Level.INFO
WARN = Level.WARN
ERROR = Level.ERROR
FATAL = Level.FATAL

__all__ = [
    # Version
    "__version__",
    # Levels
    "Level",
    "DEBUG",
    "INFO",
    "WARN",
    "ERROR",
    "FATAL",
    # Core exceptions
    "LogKeeperError",
    "LogConfigError",
    "RotationError",
    "MailDeliveryError",
    "InvalidLevelError",
    "get_logger",
    "setup_diagnostics",
    # Configuration
    "LogKeeperSettings",
    "LoggerConfig",
    "MailConfig",
    # Logger
    "LogKeeper",
    "RawWriter",
    "LogKeeperHandler",
    # Clients
    "SMTPClient",
    "MailNotifier",
    "deliver_log_mail",
    # Default instance
    "configure",
    "get_default",
    "set_default",
    "reset_default",
    # Module-level API
    "debug",
    "debugf",
    "info",
    "infof",
    "warn",
    "warnf",
    "warning",
    "error",
    "errorf",
    "fatal",
    "fatalf",
    "flush",
    "writer",
    "send_log_mail",
    "set_level",
    "set_path",
    "set_max_size",
    "set_max_storage_days",
    "set_flush_interval",
    "set_file_output_disabled",
    "set_console_disabled",
    "set_call_info",
    "set_short_path",
    "set_mail_enabled",
    "set_mail_config",
    "set_mail_recipients",
]

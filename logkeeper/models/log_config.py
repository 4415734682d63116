"""Logger configuration model.

Defines the options a ``LogKeeper`` instance is built from. Absent or
zero values fall back to the documented defaults, both at construction
and when a setter assigns a new value.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from logkeeper.models.mail_config import MailConfig

DEFAULT_PATH = "logs/log.log"
DEFAULT_MAX_SIZE = 256 * 1024 * 1024  # 256 MiB
DEFAULT_MAX_STORAGE_DAYS = 60
DEFAULT_FLUSH_INTERVAL = 30.0  # seconds

_ZERO_DEFAULTS: dict[str, Any] = {
    "path": DEFAULT_PATH,
    "max_size": DEFAULT_MAX_SIZE,
    "max_storage_days": DEFAULT_MAX_STORAGE_DAYS,
    "flush_interval": DEFAULT_FLUSH_INTERVAL,
}


class LoggerConfig(BaseModel):
    """Configuration of a single logger instance.

    Attributes:
        path: Active log file; rotated files live next to it.
        max_size: Bytes after which the file is rotated.
        max_storage_days: Retention window; negative disables deletion.
        flush_interval: Seconds between background flushes.
        file_disabled: Skip file output entirely (console only).
        console_disabled: Do not echo records to stderr.
        call_info: Embed ``file:line`` of the logging call.
        short_path: Keep only the last two path segments of ``file``.
        handle_signals: Install the SIGTERM/SIGINT shutdown flush.
        mail_enabled: Ship closed files by e-mail.
        mail: SMTP settings used when ``mail_enabled`` is set.
    """

    model_config = ConfigDict(validate_assignment=True)

    path: str = Field(default=DEFAULT_PATH, description="Active log file path")
    max_size: int = Field(default=DEFAULT_MAX_SIZE, gt=0, description="Rotation size")
    max_storage_days: int = Field(
        default=DEFAULT_MAX_STORAGE_DAYS,
        description="Days rotated files are kept (negative disables deletion)",
    )
    flush_interval: float = Field(
        default=DEFAULT_FLUSH_INTERVAL, gt=0, description="Background flush interval"
    )
    file_disabled: bool = Field(default=False, description="Disable file output")
    console_disabled: bool = Field(default=False, description="Disable stderr echo")
    call_info: bool = Field(default=False, description="Capture call-site file:line")
    short_path: bool = Field(default=False, description="Shorten call-site paths")
    handle_signals: bool = Field(default=True, description="Flush on SIGTERM/SIGINT")
    mail_enabled: bool = Field(default=False, description="Mail files on rotation")
    mail: MailConfig = Field(default_factory=MailConfig)

    @field_validator("path", "max_size", "max_storage_days", "flush_interval", mode="before")
    @classmethod
    def apply_zero_defaults(cls, v: Any, info: ValidationInfo) -> Any:
        """Replace absent or zero values with the documented default."""
        if v is None or v == 0 or v == "":
            return _ZERO_DEFAULTS[info.field_name]
        return v

    @field_validator("mail", mode="before")
    @classmethod
    def default_mail(cls, v: Any) -> Any:
        """Treat an absent mail section as an empty one."""
        return MailConfig() if v is None else v

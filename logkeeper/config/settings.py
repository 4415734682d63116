"""Logkeeper settings with Pydantic v2.

Loads the default logger configuration from environment variables or a
.env file. Used to build the process-wide default logger when no
explicit instance has been constructed.

All settings can be overridden via environment variables.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logkeeper.models.log_config import (
    DEFAULT_FLUSH_INTERVAL,
    DEFAULT_MAX_SIZE,
    DEFAULT_MAX_STORAGE_DAYS,
    DEFAULT_PATH,
    LoggerConfig,
)
from logkeeper.models.mail_config import MailConfig


class LogKeeperSettings(BaseSettings):
    """Environment-driven logger settings.

    Attributes:
        LOG_PATH: Active log file path.
        LOG_LEVEL: Initial threshold (DEBUG, INFO, WARN, ERROR, FATAL).
        LOG_MAX_SIZE: Rotation size in bytes.
        LOG_MAX_STORAGE_DAYS: Retention window in days (negative disables).
        LOG_FLUSH_INTERVAL: Seconds between background flushes.
        LOG_FILE_DISABLED: Disable file output.
        LOG_CONSOLE_DISABLED: Disable the stderr echo.
        LOG_CALL_INFO: Capture call-site file:line.
        LOG_SHORT_PATH: Shorten call-site paths to two segments.
        LOG_HANDLE_SIGNALS: Install the shutdown flush on SIGTERM/SIGINT.
        LOG_MAIL_ENABLED: Mail closed log files.
        SMTP_HOST: SMTP server hostname.
        SMTP_PORT: SMTP server port (1-65535).
        SMTP_USER: SMTP authentication username.
        SMTP_PASSWORD: SMTP authentication password.
        SMTP_FROM_NAME: Sender display name.
        SMTP_FROM_EMAIL: Sender address (defaults to SMTP_USER).
        SMTP_USE_TLS: Whether to use STARTTLS.
        SMTP_TIMEOUT: SMTP timeout in seconds.
        LOG_MAIL_SUBJECT: Subject of log mails.
        LOG_MAIL_RECIPIENTS: Comma-separated recipient addresses.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ========================================================================
    # File Output Configuration
    # ========================================================================
    LOG_PATH: str = Field(
        default=DEFAULT_PATH,
        description="Active log file path",
    )
    LOG_LEVEL: str = Field(
        default="DEBUG",
        pattern="^(DEBUG|INFO|WARN|WARNING|ERROR|FATAL)$",
        description="Initial logging threshold",
    )
    LOG_MAX_SIZE: int = Field(
        default=DEFAULT_MAX_SIZE,
        ge=0,
        description="Rotation size in bytes (0 means default)",
    )
    LOG_MAX_STORAGE_DAYS: int = Field(
        default=DEFAULT_MAX_STORAGE_DAYS,
        description="Retention window in days",
    )
    LOG_FLUSH_INTERVAL: float = Field(
        default=DEFAULT_FLUSH_INTERVAL,
        ge=0,
        description="Seconds between background flushes",
    )
    LOG_FILE_DISABLED: bool = Field(default=False, description="Disable file output")
    LOG_CONSOLE_DISABLED: bool = Field(default=False, description="Disable stderr echo")
    LOG_CALL_INFO: bool = Field(default=False, description="Capture call-site info")
    LOG_SHORT_PATH: bool = Field(default=False, description="Shorten call-site paths")
    LOG_HANDLE_SIGNALS: bool = Field(default=True, description="Flush on signals")

    # ========================================================================
    # Mail Configuration
    # ========================================================================
    LOG_MAIL_ENABLED: bool = Field(default=False, description="Mail closed log files")
    SMTP_HOST: str = Field(default="", description="SMTP server hostname")
    SMTP_PORT: int = Field(default=465, ge=1, le=65535, description="SMTP server port")
    SMTP_USER: str = Field(default="", description="SMTP authentication username")
    SMTP_PASSWORD: str = Field(default="", description="SMTP authentication password")
    SMTP_FROM_NAME: str = Field(default="", description="Sender display name")
    SMTP_FROM_EMAIL: str = Field(default="", description="Sender email address")
    SMTP_USE_TLS: bool = Field(default=True, description="Whether to use STARTTLS")
    SMTP_TIMEOUT: int = Field(
        default=30,
        ge=1,
        le=120,
        description="SMTP timeout in seconds",
    )
    LOG_MAIL_SUBJECT: str = Field(default="", description="Subject of log mails")
    LOG_MAIL_RECIPIENTS: str = Field(
        default="",
        description="Comma-separated recipient addresses",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Accept lower-case level names."""
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("SMTP_PASSWORD")
    @classmethod
    def validate_smtp_password(cls, v: str) -> str:
        """Remove spaces from SMTP password (Gmail app password format)."""
        return v.replace(" ", "")

    def get_mail_config(self) -> MailConfig:
        """Build the mail section of the logger configuration.

        Returns:
            MailConfig populated from the SMTP_* and LOG_MAIL_* settings.
        """
        return MailConfig(
            host=self.SMTP_HOST,
            port=self.SMTP_PORT,
            username=self.SMTP_USER,
            password=self.SMTP_PASSWORD,
            from_name=self.SMTP_FROM_NAME,
            from_email=self.SMTP_FROM_EMAIL or None,
            subject=self.LOG_MAIL_SUBJECT,
            recipients=self.LOG_MAIL_RECIPIENTS,
            use_tls=self.SMTP_USE_TLS,
            timeout=self.SMTP_TIMEOUT,
        )

    def to_logger_config(self) -> LoggerConfig:
        """Build a ``LoggerConfig`` from the loaded settings.

        Returns:
            LoggerConfig ready to pass to ``LogKeeper``.
        """
        return LoggerConfig(
            path=self.LOG_PATH,
            max_size=self.LOG_MAX_SIZE,
            max_storage_days=self.LOG_MAX_STORAGE_DAYS,
            flush_interval=self.LOG_FLUSH_INTERVAL,
            file_disabled=self.LOG_FILE_DISABLED,
            console_disabled=self.LOG_CONSOLE_DISABLED,
            call_info=self.LOG_CALL_INFO,
            short_path=self.LOG_SHORT_PATH,
            handle_signals=self.LOG_HANDLE_SIGNALS,
            mail_enabled=self.LOG_MAIL_ENABLED,
            mail=self.get_mail_config(),
        )

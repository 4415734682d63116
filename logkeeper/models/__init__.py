"""Models module for logkeeper.

Defines Pydantic v2 models for logger and mail configuration.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from logkeeper.models.log_config import (
    DEFAULT_FLUSH_INTERVAL,
    DEFAULT_MAX_SIZE,
    DEFAULT_MAX_STORAGE_DAYS,
    DEFAULT_PATH,
    LoggerConfig,
)
from logkeeper.models.mail_config import MailConfig

__all__ = [
    # Models
    "LoggerConfig",
    "MailConfig",
    # Defaults
    "DEFAULT_PATH",
    "DEFAULT_MAX_SIZE",
    "DEFAULT_MAX_STORAGE_DAYS",
    "DEFAULT_FLUSH_INTERVAL",
]

"""Core module for logkeeper.

Provides levels, exceptions and the diagnostics logger.

Author: Odiseo
Created: 2025-10-18
Version: 2.0.0
"""

from logkeeper.core.exceptions import (
    InvalidLevelError,
    LogConfigError,
    LogKeeperError,
    MailDeliveryError,
    RotationError,
)
from logkeeper.core.levels import Level
from logkeeper.core.logger import get_logger, log_context, setup_diagnostics

__all__ = [
    # Levels
    "Level",
    # Exceptions
    "LogKeeperError",
    "LogConfigError",
    "RotationError",
    "MailDeliveryError",
    "InvalidLevelError",
    # Logging
    "get_logger",
    "setup_diagnostics",
    "log_context",
]

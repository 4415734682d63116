"""Custom exceptions for logkeeper.

Defines specific exception types for the failure classes a logger
instance can hit, so callers and the dispatcher can tell fatal
conditions from best-effort ones.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""


class LogKeeperError(Exception):
    """Base exception for all logkeeper errors.

    Example:
        try:
            keeper.set_mail_enabled(True)
        except LogKeeperError as e:
            print(f"logkeeper error: {e}")
    """

    pass


class LogConfigError(LogKeeperError):
    """Exception raised for configuration errors.

    Indicates that mail delivery was enabled with an incomplete
    mail configuration.

    Attributes:
        missing_fields (list[str]): Names of the settings that are not set.

    Example:
        raise LogConfigError(
            "Mail is enabled but settings are missing: password",
            missing_fields=["password"],
        )
    """

    def __init__(self, message: str, missing_fields: list[str] | None = None):
        """Initialize configuration error.

        Args:
            message: Error description.
            missing_fields: Optional names of the missing settings.
        """
        super().__init__(message)
        self.missing_fields = missing_fields or []


class RotationError(LogKeeperError):
    """Exception raised when the log file cannot be opened or rotated.

    Attributes:
        path (str, optional): File path involved in the failed operation.

    Example:
        raise RotationError("Cannot open logs/app.log", path="logs/app.log")
    """

    def __init__(self, message: str, path: str | None = None):
        """Initialize rotation error.

        Args:
            message: Error description.
            path: Optional file path involved.
        """
        super().__init__(message)
        self.path = path


class MailDeliveryError(LogKeeperError):
    """Exception raised for SMTP connection/delivery failures.

    Attributes:
        is_transient (bool): Whether error is temporary (retry may succeed).

    Example:
        raise MailDeliveryError(
            "Connection timeout to smtp.gmail.com:465",
            is_transient=True
        )
    """

    def __init__(self, message: str, is_transient: bool = False):
        """Initialize mail delivery error.

        Args:
            message: Error description.
            is_transient: Whether error is temporary and retryable.
        """
        super().__init__(message)
        self.is_transient = is_transient


class InvalidLevelError(LogKeeperError, ValueError):
    """Exception raised when a threshold outside DEBUG..FATAL is supplied."""

    pass

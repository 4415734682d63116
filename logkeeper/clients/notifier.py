"""Mail notifier: ships a log file through the mail transport.

Called by the rotation engine just before a file is closed, by the
fatal-exit path, and on explicit request. Delivery is best-effort: any
failure is reported on stderr and swallowed so the logging path itself
never fails because of mail.

Version: 1.0.0
"""

from __future__ import annotations

import os
from collections.abc import Callable

from logkeeper.clients.smtp import deliver_log_mail
from logkeeper.core.exceptions import MailDeliveryError
from logkeeper.core.logger import get_logger
from logkeeper.models.log_config import LoggerConfig
from logkeeper.models.mail_config import MailConfig

logger = get_logger(__name__)

# (mail config, attachment name, body) -> None, raising on failure
MailTransport = Callable[[MailConfig, str, str], None]


class MailNotifier:
    """Reads a log file back and hands it to the mail transport.

    Attributes:
        config: Live logger configuration (``mail_enabled``, ``mail``).
        transport: Delivery function; defaults to SMTP.
    """

    def __init__(self, config: LoggerConfig, transport: MailTransport | None = None) -> None:
        self.config = config
        self.transport = transport or deliver_log_mail

    def notify(self, path: str | None) -> bool:
        """Mail the content of ``path`` if mail is enabled.

        Args:
            path: Log file to ship; None means no file is available.

        Returns:
            True if the transport accepted the mail.
        """
        if not self.config.mail_enabled or not path:
            return False

        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                body = f.read()
        except OSError as e:
            logger.error(f"Log sendmail error: cannot read {path}: {e}")
            return False

        try:
            self.transport(self.config.mail, os.path.basename(path), body)
        except MailDeliveryError as e:
            kind = "transient" if e.is_transient else "permanent"
            logger.error(f"Log sendmail error ({kind}): {e}")
            return False
        except Exception as e:
            logger.error(f"Log sendmail error: {e}")
            return False
        return True

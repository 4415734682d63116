"""SMTP client for log mail delivery.

Sends a log file's content as an HTML body plus a file attachment via
SMTP. Each delivery opens its own connection: log mails are rare
(rotation, fatal exit, explicit request) so there is nothing to reuse.

Features:
- Implicit SSL on port 465, STARTTLS elsewhere when enabled
- Bounded socket timeout on every SMTP call
- Multiple recipients
- Transient error detection in raised errors

Author: Odiseo
Version: 2.1.0
"""

from __future__ import annotations

import smtplib
import time
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from logkeeper.core.exceptions import MailDeliveryError
from logkeeper.core.logger import get_logger
from logkeeper.models.mail_config import MailConfig

logger = get_logger(__name__)

SSL_PORT = 465


def attachment_filename(name: str, now: float | None = None) -> str:
    """Prefix the attachment name with the delivery date.

    Example:
        attachment_filename("log.log")  # "2025-10-18 log.log"
    """
    stamp = time.strftime("%Y-%m-%d", time.localtime(time.time() if now is None else now))
    return f"{stamp} {name}"


class SMTPClient:
    """SMTP delivery client for log mails.

    Attributes:
        config: Mail configuration (endpoint, credentials, recipients).
    """

    def __init__(self, mail_config: MailConfig) -> None:
        """Initialize SMTP client.

        Args:
            mail_config: Mail configuration to deliver with.
        """
        self.config = mail_config
        self._connection: smtplib.SMTP | None = None

    def _create_connection(self) -> smtplib.SMTP:
        """Create new SMTP connection.

        Returns:
            New authenticated SMTP connection.

        Raises:
            MailDeliveryError: If connection fails.
        """
        try:
            logger.debug(f"Connecting to SMTP: {self.config.host}:{self.config.port}")
            smtp: smtplib.SMTP
            if self.config.port == SSL_PORT:
                smtp = smtplib.SMTP_SSL(
                    self.config.host,
                    self.config.port,
                    timeout=self.config.timeout,
                )
            else:
                smtp = smtplib.SMTP(
                    self.config.host,
                    self.config.port,
                    timeout=self.config.timeout,
                )
                if self.config.use_tls:
                    logger.debug("Starting TLS...")
                    smtp.starttls()

            if self.config.username:
                smtp.login(self.config.username, self.config.password)

            self._connection = smtp
            logger.debug("SMTP connection established")
            return smtp

        except Exception as e:
            raise MailDeliveryError(
                f"Failed to connect to SMTP server: {e}",
                is_transient=self._is_transient_error(e),
            ) from e

    def _close_connection(self) -> None:
        """Close existing SMTP connection safely."""
        if self._connection:
            try:
                self._connection.quit()
            except Exception as e:
                logger.debug(f"Error closing SMTP connection (non-critical): {e}")
            finally:
                self._connection = None

    def build_message(self, attachment_name: str, body: str) -> MIMEMultipart:
        """Build the log mail.

        Args:
            attachment_name: Base name of the log file.
            body: Log content, used as HTML body and attachment.

        Returns:
            Multipart message ready to send.
        """
        msg = MIMEMultipart("mixed")
        msg["From"] = formataddr((self.config.from_name, self.config.sender_address))
        msg["To"] = ", ".join(str(r) for r in self.config.recipients)
        msg["Subject"] = self.config.subject

        msg.attach(MIMEText(body, "html", "utf-8"))

        filename = attachment_filename(attachment_name)
        attachment = MIMEApplication(body.encode("utf-8"), Name=filename)
        attachment["Content-Disposition"] = f'attachment; filename="{filename}"'
        msg.attach(attachment)
        return msg

    def send_log(self, attachment_name: str, body: str) -> None:
        """Send a log file by mail.

        Args:
            attachment_name: Base name of the log file.
            body: Log content.

        Raises:
            MailDeliveryError: If the mail cannot be delivered.
        """
        recipients = [str(r) for r in self.config.recipients]
        if not recipients:
            raise MailDeliveryError("No mail recipients configured")

        msg = self.build_message(attachment_name, body)
        smtp = self._create_connection()
        try:
            smtp.send_message(
                msg,
                from_addr=self.config.sender_address,
                to_addrs=recipients,
            )
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(
                f"Failed to send log mail to {', '.join(recipients)}: {e}",
                is_transient=self._is_transient_error(e),
            ) from e
        finally:
            self._close_connection()

        logger.info(f"Log mail sent to {len(recipients)} recipient(s) - {attachment_name}")

    def close(self) -> None:
        """Close SMTP connection and cleanup resources."""
        self._close_connection()

    @staticmethod
    def _is_transient_error(error: Exception) -> bool:
        """Determine if error is temporary (retryable).

        Args:
            error: Exception to analyze.

        Returns:
            True if error is likely transient and retry may succeed.
        """
        error_str = str(error).lower()
        transient_keywords = [
            "timeout",
            "timed out",
            "connection",
            "temporarily",
            "try again",
            "unavailable",
            "refused",
            "reset",
            "broken pipe",
        ]
        return any(keyword in error_str for keyword in transient_keywords)

    def __enter__(self) -> SMTPClient:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.close()


def deliver_log_mail(mail_config: MailConfig, attachment_name: str, body: str) -> None:
    """Default mail transport: deliver one log mail over SMTP.

    Raises:
        MailDeliveryError: If delivery fails.
    """
    with SMTPClient(mail_config) as client:
        client.send_log(attachment_name, body)

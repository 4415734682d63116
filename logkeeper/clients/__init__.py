"""Clients module for logkeeper.

Contains the SMTP mail transport and the notifier that ships log files
through it.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from logkeeper.clients.notifier import MailNotifier, MailTransport
from logkeeper.clients.smtp import SMTPClient, deliver_log_mail

__all__ = ["MailNotifier", "MailTransport", "SMTPClient", "deliver_log_mail"]

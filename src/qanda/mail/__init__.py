"""Outbound email for account notifications."""

from .base import MailDeliveryError, MailMessage, MailTransport
from .factory import get_mail_transport
from .templates import make_nice_email

__all__ = [
    "MailDeliveryError",
    "MailMessage",
    "MailTransport",
    "get_mail_transport",
    "make_nice_email",
]

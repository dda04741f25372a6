"""Factory for creating mail transports based on configuration."""

from __future__ import annotations

from ..config import Settings, settings
from .base import MailTransport
from .console import ConsoleMailTransport
from .resend import ResendMailTransport
from .smtp import SmtpMailTransport


def get_mail_transport(config: Settings | None = None) -> MailTransport:
    """Create and return the configured mail transport."""
    config = config or settings
    provider = config.mail_provider.lower()

    if provider == "console":
        return ConsoleMailTransport()

    elif provider == "smtp":
        if not config.smtp_host:
            raise ValueError("SMTP host is required. Set QANDA_SMTP_HOST.")

        return SmtpMailTransport(
            host=config.smtp_host,
            port=config.smtp_port,
            username=config.smtp_username,
            password=config.smtp_password,
            starttls=config.smtp_starttls,
            timeout=config.smtp_timeout,
        )

    elif provider == "resend":
        if not config.resend_api_key:
            raise ValueError("Resend API key is required. Set QANDA_RESEND_API_KEY.")

        return ResendMailTransport(
            api_key=config.resend_api_key,
            api_url=config.resend_api_url,
            timeout=config.resend_timeout,
        )

    else:
        raise ValueError(f"Unsupported mail provider: {config.mail_provider}")

"""SMTP mail transport."""

from __future__ import annotations

import asyncio
import smtplib
from email.message import EmailMessage

from ..logging import get_logger
from .base import MailDeliveryError, MailMessage

logger = get_logger(__name__)


class SmtpMailTransport:
    """Sends mail through an SMTP relay.

    smtplib is blocking, so delivery runs in a worker thread.
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        starttls: bool = True,
        timeout: float = 15.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.starttls = starttls
        self.timeout = timeout

    async def send(self, message: MailMessage) -> None:
        try:
            await asyncio.to_thread(self._send_sync, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("SMTP delivery failed", host=self.host, port=self.port, error=str(e))
            raise MailDeliveryError(f"SMTP delivery failed: {e}") from e

    def _send_sync(self, message: MailMessage) -> None:
        email = EmailMessage()
        email["From"] = message.sender
        email["To"] = message.to
        email["Subject"] = message.subject
        email.set_content(message.html, subtype="html")

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.starttls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password or "")
            server.send_message(email)

"""Console mail transport for local development."""

from __future__ import annotations

from ..logging import get_logger
from .base import MailMessage

logger = get_logger(__name__)


class ConsoleMailTransport:
    """
    Writes messages to the log instead of sending them.

    Useful in development: reset links show up in the server output.
    """

    async def send(self, message: MailMessage) -> None:
        logger.info(
            "Email (console transport)",
            sender=message.sender,
            to=message.to,
            subject=message.subject,
            html=message.html,
        )

"""Base mail transport interface and types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class MailMessage:
    """A single HTML email."""

    sender: str
    to: str
    subject: str
    html: str


class MailTransport(Protocol):
    """Provider-agnostic outbound mail interface."""

    async def send(self, message: MailMessage) -> None:
        """
        Deliver a message.

        Raises:
            MailDeliveryError: If the provider rejects or cannot be reached
        """
        ...


class MailDeliveryError(Exception):
    """Raised when a message could not be handed to the mail provider."""

    pass

"""Resend HTTP API mail transport."""

from __future__ import annotations

import httpx

from ..logging import get_logger
from .base import MailDeliveryError, MailMessage

logger = get_logger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendMailTransport:
    """Sends mail with a single authenticated POST to the Resend API."""

    def __init__(self, api_key: str, api_url: str = RESEND_API_URL, timeout: float = 10.0):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout

    async def send(self, message: MailMessage) -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.api_url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={
                        "from": message.sender,
                        "to": message.to,
                        "subject": message.subject,
                        "html": message.html,
                    },
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Resend delivery failed", error=str(e))
            raise MailDeliveryError(f"Resend delivery failed: {e}") from e

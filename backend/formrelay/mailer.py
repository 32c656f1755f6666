"""
Email delivery client.
Uses Resend for outbound transactional email.

The client is created once at import time from RESEND_API_KEY. When the key is
missing (or still a REPLACE_WITH... placeholder) `email_client` is None and the
relay answers every submission with a configuration error.
"""

import asyncio
import logging
from typing import Any, Optional

import resend

from formrelay.config import RESEND_API_KEY
from formrelay.models.submission import OutboundEmail

logger = logging.getLogger(__name__)


def is_valid_api_key(api_key: Optional[str]) -> bool:
    """Return True if the key is set and is not a template placeholder."""
    return bool(api_key) and "REPLACE_WITH" not in api_key


class EmailDeliveryClient:
    """Thin async wrapper around the synchronous Resend SDK."""

    def __init__(self, api_key: str):
        if not is_valid_api_key(api_key):
            raise ValueError("A valid Resend API key is required")
        self.api_key = api_key
        resend.api_key = api_key

    def send_sync(self, message: OutboundEmail) -> Any:
        return resend.Emails.send(message.to_resend_params())

    async def send(self, message: OutboundEmail) -> Any:
        """
        Send one message and return the provider's raw result.

        Exactly one attempt is made; any SDK or network error propagates to
        the caller unchanged.
        """
        return await asyncio.to_thread(self.send_sync, message)


email_client: Optional[EmailDeliveryClient] = (
    EmailDeliveryClient(RESEND_API_KEY) if is_valid_api_key(RESEND_API_KEY) else None
)

if email_client is None:
    logger.warning("RESEND_API_KEY is not configured; form submissions will be rejected")

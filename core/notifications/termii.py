"""Termii SMS client."""

import logging
from typing import Optional

import httpx

from config import settings

logger = logging.getLogger(__name__)


class TermiiSmsClient:
    """Sends plain SMS through the Termii API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        sender_id: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.termii_api_key
        self.sender_id = sender_id or settings.termii_sender_id
        self.base_url = (base_url or settings.termii_base_url).rstrip("/")
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=15.0)
        return self._client

    async def close(self):
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def send_sms(self, phone: str, message: str) -> bool:
        """
        Send an SMS.

        Returns:
            True if Termii accepted the message, False if not configured

        Raises:
            httpx.HTTPError: On transport or API failure
        """
        if not self.is_configured:
            logger.debug("Termii not configured, SMS to %s skipped", phone)
            return False

        client = await self._get_client()
        response = await client.post(
            f"{self.base_url}/sms/send",
            json={
                "api_key": self.api_key,
                "to": phone,
                "from": self.sender_id,
                "sms": message,
                "type": "plain",
                "channel": "generic",
            },
        )
        response.raise_for_status()
        logger.info(f"SMS sent to {phone[:6]}***")
        return True

"""License delivery email via the Resend HTTP API."""
from __future__ import annotations

import logging
from typing import Callable, Optional

import httpx

from sna.utils.timeout_config import get_quick_client

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


class LicenseMailer:
    """Sends newly provisioned license keys to buyers."""

    def __init__(
        self,
        api_key: Optional[str],
        sender: str,
        url: str = RESEND_EMAILS_URL,
        client_factory: Callable[[], httpx.AsyncClient] = get_quick_client,
    ):
        self.api_key = api_key
        self.sender = sender
        self.url = url
        self._client_factory = client_factory

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def send_license(self, email: str, license_key: str) -> bool:
        """Email ``license_key`` to ``email``. Failures are logged, not raised."""
        if not self.enabled:
            return False

        body = {
            "from": self.sender,
            "to": email,
            "subject": "Your Scryfall Syntax Extension License",
            "text": (
                "Thanks for your purchase!\n\n"
                f"Your license key:\n{license_key}\n\n"
                "Install: chrome://extensions → Load unpacked → open popup → paste key."
            ),
        }
        try:
            async with self._client_factory() as client:
                response = await client.post(
                    self.url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json=body,
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"License email send failed: {e}")
            return False

        logger.info("License email sent")
        return True

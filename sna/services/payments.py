"""
Stripe checkout integration.

The webhook provisions a license key for every completed checkout and the
success page recovers that key through the checkout session id.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import stripe

from sna.constants import CHECKOUT_COMPLETED_EVENT
from sna.errors import SignatureInvalid
from sna.services.licenses import LicenseStore, generate_license_key
from sna.services.mailer import LicenseMailer

logger = logging.getLogger(__name__)


class PaymentGateway:
    """Thin wrapper over the Stripe SDK calls the API needs."""

    def __init__(self, secret_key: Optional[str], webhook_secret: Optional[str]):
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret

    def verify_event(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """Verify a webhook payload and return the event as a plain dict.

        Raises ``stripe.SignatureVerificationError`` or ``ValueError``.
        """
        if not self.webhook_secret:
            raise ValueError("Stripe webhook secret is not configured")
        stripe.Webhook.construct_event(payload, signature or "", self.webhook_secret)
        return json.loads(payload)

    async def get_session_email(self, session_id: str) -> Optional[str]:
        """Return the lower-cased customer email of a checkout session."""
        session = await stripe.checkout.Session.retrieve_async(session_id, api_key=self.secret_key)
        details = getattr(session, "customer_details", None)
        email = getattr(details, "email", None) if details else None
        return email.lower() if email else None


class PaymentWebhookService:
    """Turns verified checkout events into license keys."""

    def __init__(
        self,
        gateway: PaymentGateway,
        licenses: LicenseStore,
        mailer: Optional[LicenseMailer] = None,
        allow_unverified: bool = False,
    ):
        self.gateway = gateway
        self.licenses = licenses
        self.mailer = mailer
        self.allow_unverified = allow_unverified

    def _parse_event(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        try:
            return self.gateway.verify_event(payload, signature)
        except (stripe.SignatureVerificationError, ValueError) as e:
            if not self.allow_unverified:
                logger.warning(f"Webhook signature verification failed: {e}")
                raise SignatureInvalid(f"Webhook Error: {e}") from e
            logger.warning(f"Webhook signature verification failed ({e}); parsing unverified event")

        try:
            event = json.loads(payload)
        except ValueError as e:
            raise SignatureInvalid("Webhook Error: invalid payload") from e
        if not isinstance(event, dict):
            raise SignatureInvalid("Webhook Error: invalid payload")
        return event

    async def handle(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """Process one webhook delivery."""
        event = self._parse_event(payload, signature)
        event_type = event.get("type")
        if event_type != CHECKOUT_COMPLETED_EVENT:
            logger.debug(f"Ignoring webhook event {event_type}")
            return {"received": True}

        session = (event.get("data") or {}).get("object") or {}
        email = ((session.get("customer_details") or {}).get("email") or "").lower() or None

        license_key = generate_license_key()
        while not await self.licenses.add(license_key, email):
            license_key = generate_license_key()

        logger.info(f"Activated {license_key[:9]}... for {email or 'unknown'}")

        if email and self.mailer is not None:
            await self.mailer.send_license(email, license_key)

        return {"received": True}


"""Payment provider webhook route."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from sna.dependencies import get_webhook_service
from sna.models import ErrorResponse, WebhookAckResponse
from sna.services.payments import PaymentWebhookService

router = APIRouter(tags=["webhooks"])


@router.post(
    "/webhook/payment-completed",
    response_model=WebhookAckResponse,
    responses={400: {"model": ErrorResponse}},
)
async def payment_completed(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
    webhooks: PaymentWebhookService = Depends(get_webhook_service),
) -> WebhookAckResponse:
    """Provision a license key for a completed Stripe checkout.

    The body is read raw; signature verification needs the exact bytes.
    """
    payload = await request.body()
    result = await webhooks.handle(payload, stripe_signature)
    return WebhookAckResponse(**result)

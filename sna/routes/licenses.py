"""License validation and post-checkout lookup routes."""
from __future__ import annotations

import logging
from typing import Optional

import stripe
from fastapi import APIRouter, Depends, Query

from sna.dependencies import get_license_store, get_payment_gateway, get_rate_limiter
from sna.errors import InputInvalid, NotFound, UpstreamUnavailable
from sna.models import ErrorResponse, IdentityLookupResponse, ValidateIdentityRequest, ValidateIdentityResponse
from sna.services.licenses import LicenseStore
from sna.services.payments import PaymentGateway
from sna.services.rate_limiter import RateLimiter

router = APIRouter(tags=["licenses"])
logger = logging.getLogger(__name__)


@router.post(
    "/validate-identity",
    response_model=ValidateIdentityResponse,
    responses={400: {"model": ErrorResponse}},
)
async def validate_identity(
    request: ValidateIdentityRequest,
    licenses: LicenseStore = Depends(get_license_store),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
) -> ValidateIdentityResponse:
    """Report whether a license key is active."""
    if not request.identity:
        raise InputInvalid(
            "License key required",
            headers=rate_limiter.fresh_headers(),
            extra={"valid": False},
        )
    return ValidateIdentityResponse(valid=await licenses.is_valid(request.identity))


@router.get(
    "/identity/by-session",
    response_model=IdentityLookupResponse,
    responses={code: {"model": ErrorResponse} for code in (400, 404, 502)},
)
async def identity_by_session(
    session_id: Optional[str] = Query(None, alias="sessionId", description="Stripe checkout session id"),
    legacy_session_id: Optional[str] = Query(None, alias="session_id", include_in_schema=False),
    licenses: LicenseStore = Depends(get_license_store),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> IdentityLookupResponse:
    """Recover the license key issued for a completed checkout session."""
    sid = session_id or legacy_session_id
    if not sid:
        raise InputInvalid("sessionId required")

    try:
        email = await gateway.get_session_email(sid)
    except stripe.StripeError as e:
        logger.error(f"Checkout session lookup failed: {e}")
        raise UpstreamUnavailable("lookup failed") from e

    if not email:
        raise NotFound("email not found")

    license_key = await licenses.find_by_email(email)
    if not license_key:
        raise NotFound("license not found")
    return IdentityLookupResponse(identity=license_key)

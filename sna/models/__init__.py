"""Aggregate exports for API models."""
from .sets import SetCandidate, SetRecord
from .requests import ConvertRequest, ValidateIdentityRequest
from .responses import (
    ConvertResponse,
    ErrorResponse,
    HealthResponse,
    IdentityLookupResponse,
    ValidateIdentityResponse,
    WebhookAckResponse,
)

__all__ = [
    "SetCandidate",
    "SetRecord",
    "ConvertRequest",
    "ValidateIdentityRequest",
    "ConvertResponse",
    "ErrorResponse",
    "HealthResponse",
    "IdentityLookupResponse",
    "ValidateIdentityResponse",
    "WebhookAckResponse",
]

"""Error taxonomy for the conversion API.

Every ``ApiError`` is rendered by the application's exception handler as a
small JSON body ``{"error": message, **extra}`` with the error's status code
and headers. Internal collaborator failures (``CatalogUnavailable``,
``CompletionFailed``) are plain exceptions; the conversion service maps them
to ``UpstreamUnavailable``.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class ApiError(Exception):
    """Base class for user-visible failures."""

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.headers: Dict[str, str] = dict(headers or {})
        self.extra: Dict[str, Any] = dict(extra or {})

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        payload.update(self.extra)
        return payload


class InputInvalid(ApiError):
    """Missing or malformed request input."""

    status_code = 400


class IdentityRequired(InputInvalid):
    """Request carried no license key."""

    status_code = 401


class IdentityRejected(ApiError):
    """License key is unknown."""

    status_code = 403


class NotFound(ApiError):
    status_code = 404


class QuotaExceeded(ApiError):
    """Per-license window exhausted; retryable after ``reset_seconds``."""

    status_code = 429

    def __init__(self, limit: int, reset_seconds: int, *, headers: Optional[Mapping[str, str]] = None) -> None:
        super().__init__(
            "Rate limit exceeded. Try again later.",
            headers=headers,
            extra={"limit": limit, "resetSeconds": reset_seconds},
        )
        self.limit = limit
        self.reset_seconds = reset_seconds


class UpstreamUnavailable(ApiError):
    """Catalog or completion service failed; not retried internally."""

    status_code = 502


class SignatureInvalid(ApiError):
    """Payment webhook payload failed signature verification."""

    status_code = 400


class CatalogUnavailable(Exception):
    """Raised when the set catalog cannot be fetched."""


class CompletionFailed(Exception):
    """Raised when the completion service does not return usable text."""


__all__ = [
    "ApiError",
    "InputInvalid",
    "IdentityRequired",
    "IdentityRejected",
    "NotFound",
    "QuotaExceeded",
    "UpstreamUnavailable",
    "SignatureInvalid",
    "CatalogUnavailable",
    "CompletionFailed",
]

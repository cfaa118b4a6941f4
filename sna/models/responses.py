"""Response models for API endpoints."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class ConvertResponse(BaseModel):
    """Response model for the conversion endpoint."""
    syntax: str = Field(..., description="Scryfall search syntax")


class ValidateIdentityResponse(BaseModel):
    """Response model for license key validation."""
    valid: bool = Field(..., description="Whether the license key is active")


class IdentityLookupResponse(BaseModel):
    """Response model for the post-checkout license lookup."""
    identity: str = Field(..., description="License key provisioned for the checkout")


class WebhookAckResponse(BaseModel):
    received: bool = Field(True, description="Event accepted")


class ErrorResponse(BaseModel):
    """Shape of every failure body."""
    error: str = Field(..., description="Human-readable error message")
    limit: Optional[int] = Field(None, description="Request limit (429 only)")
    resetSeconds: Optional[int] = Field(None, description="Seconds until the window resets (429 only)")


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""
    success: bool = Field(True, description="Operation success status")
    status: str = Field("healthy", description="Service status")
    licenses: int = Field(..., description="Number of active license keys")
    store: Dict[str, Any] = Field(default_factory=dict, description="License store connectivity")
    catalog: Dict[str, Any] = Field(default_factory=dict, description="Set catalog cache state")
    timestamp: str = Field(..., description="Response timestamp")

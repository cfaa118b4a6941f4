"""Request models for API endpoints.

Fields are optional so that missing values surface as the API's own 400/401
errors instead of schema validation failures.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ConvertRequest(BaseModel):
    """Request model for the natural-language conversion endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    query: Optional[str] = Field(None, description="Natural-language card search")
    identity: Optional[str] = Field(None, alias="licenseKey", description="License key")
    provider: Optional[str] = Field(None, description="Completion provider: openai or anthropic")


class ValidateIdentityRequest(BaseModel):
    """Request model for license key validation."""
    model_config = ConfigDict(populate_by_name=True)

    identity: Optional[str] = Field(None, alias="licenseKey", description="License key to check")

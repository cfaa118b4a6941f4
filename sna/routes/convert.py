"""Natural-language search conversion route."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from sna.dependencies import get_converter
from sna.models import ConvertRequest, ConvertResponse, ErrorResponse
from sna.services.converter import ConversionService

router = APIRouter(tags=["convert"])


@router.post(
    "/convert",
    response_model=ConvertResponse,
    responses={code: {"model": ErrorResponse} for code in (400, 401, 403, 429, 502)},
)
async def convert_query(
    request: ConvertRequest,
    response: Response,
    converter: ConversionService = Depends(get_converter),
) -> ConvertResponse:
    """Convert a natural-language card search into Scryfall syntax.

    Every response carries RateLimit-Limit, RateLimit-Remaining and
    RateLimit-Reset headers for the caller's license key.
    """
    result = await converter.convert(request.query, request.identity, request.provider)
    response.headers.update(converter.rate_limiter.headers_for(result.rate))
    return ConvertResponse(syntax=result.syntax)

"""System endpoints such as status, health and root."""
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends

from sna.constants import API_VERSION, SERVICE_NAME
from sna.dependencies import Services, get_services
from sna.models import HealthResponse

router = APIRouter(tags=["system"])


@router.get("/api/v1/status", response_model=Dict[str, Any])
async def api_status() -> Dict[str, Any]:
    """API status endpoint."""
    return {
        "success": True,
        "status": "online",
        "timestamp": datetime.utcnow().isoformat(),
        "version": API_VERSION,
    }


@router.get("/", response_model=Dict[str, Any])
async def root() -> Dict[str, Any]:
    """Root endpoint."""
    return {
        "success": True,
        "name": SERVICE_NAME,
        "version": API_VERSION,
        "status": "operational",
        "docs": "/docs",
    }


@router.get("/health", response_model=HealthResponse)
async def health_check(services: Services = Depends(get_services)) -> HealthResponse:
    """Health check endpoint expected by hosting environments."""
    licenses = services.licenses
    await licenses.load()
    connected = licenses.is_connected()
    return HealthResponse(
        success=connected,
        status="healthy" if connected else "degraded",
        licenses=licenses.count(),
        store={"backend": licenses.backend, "connected": connected},
        catalog=services.catalog.cache_info(),
        timestamp=datetime.utcnow().isoformat(),
    )

"""FastAPI application entry point for the Scryfall NLP API."""
import logging
import os
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from sna.constants import API_VERSION, PROVIDER_LABELS, RATE_LIMITED_PATHS, SERVICE_NAME
from sna.dependencies import build_services
from sna.errors import ApiError
from sna.routes import convert, licenses, system, webhooks

# Configure logging FIRST (before creating FastAPI app)
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(),
    ]
)

uvicorn_logger = logging.getLogger("uvicorn")
uvicorn_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

logger = logging.getLogger("sna")


def _configured_provider() -> str:
    if settings.openai_api_key:
        return PROVIDER_LABELS["openai"]
    if settings.anthropic_api_key:
        return PROVIDER_LABELS["anthropic"]
    return "NONE"


@asynccontextmanager
async def lifespan(app: FastAPI):
    services = app.state.services
    await services.licenses.load()
    services.rate_limiter.start()
    logger.info(f"{SERVICE_NAME} v{API_VERSION} starting")
    logger.info(f"Active licenses: {services.licenses.count()}")
    logger.info(f"Provider: {_configured_provider()}")
    try:
        yield
    finally:
        await services.rate_limiter.stop()
        logger.info("Shutting down")


app = FastAPI(
    title=SERVICE_NAME,
    description="Converts natural-language card searches into Scryfall search syntax.",
    version=API_VERSION,
    lifespan=lifespan,
)
app.state.services = build_services(settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["RateLimit-Limit", "RateLimit-Remaining", "RateLimit-Reset"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests with timing and response status."""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    access_logger = logging.getLogger("sna.access")
    client_host = request.client.host if request.client else "-"
    access_logger.info(
        f"{client_host} {request.method} {request.url.path} "
        f"-> {response.status_code} ({process_time:.1f}ms)"
    )

    return response


app.include_router(system.router)
app.include_router(webhooks.router)
app.include_router(convert.router)
app.include_router(licenses.router)

__all__ = ["app"]


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    """Render API errors as a small JSON body with their headers."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_payload(),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are user errors, not schema dumps."""
    headers = None
    if request.url.path in RATE_LIMITED_PATHS:
        headers = request.app.state.services.rate_limiter.fresh_headers()
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body"},
        headers=headers,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler to avoid leaking stack traces."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


if __name__ == "__main__":
    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", settings.port)),
        reload=False,
        log_level=settings.log_level.lower(),
    )

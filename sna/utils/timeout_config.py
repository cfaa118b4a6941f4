"""Centralized timeout configuration for outbound HTTP calls."""
from typing import Optional

import httpx

from config import Settings, get_settings


def get_external_timeout(settings: Optional[Settings] = None) -> httpx.Timeout:
    """Timeouts for Scryfall and completion calls, taken from ``settings``."""
    settings = settings or get_settings()
    return httpx.Timeout(
        connect=settings.external_api_connect_timeout,
        read=settings.external_api_timeout,
        write=settings.external_api_write_timeout,
        pool=5.0,
    )


def get_quick_timeout() -> httpx.Timeout:
    """Get a quick timeout for fast operations such as sending email."""
    return httpx.Timeout(connect=5.0, read=15.0, write=5.0, pool=3.0)


def get_external_client(settings: Optional[Settings] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=get_external_timeout(settings))


def get_quick_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=get_quick_timeout())

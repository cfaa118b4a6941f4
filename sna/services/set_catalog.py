"""
Set catalog cache backed by Scryfall's /sets endpoint.

The full catalog is fetched on first use and kept for ``ttl_seconds``
(24 hours by default). A stale catalog is replaced wholesale on the next
request; a failed refresh raises ``CatalogUnavailable`` and leaves whatever
was cached untouched. Concurrent refreshes are not deduplicated.
"""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx
from cachetools import TTLCache

from config import Settings, settings as default_settings
from sna.constants import ALIAS_RELEASE_DATE, SCRYFALL_HEADERS, SET_ALIASES, UNKNOWN_RELEASE_DATE
from sna.errors import CatalogUnavailable
from sna.models import SetRecord
from sna.utils.text import normalize
from sna.utils.timeout_config import get_external_client

logger = logging.getLogger(__name__)

SetFetcher = Callable[[], Awaitable[List[Dict[str, Any]]]]

_CATALOG_KEY = "sets"


async def fetch_scryfall_sets(url: Optional[str] = None, settings: Optional[Settings] = None) -> List[Dict[str, Any]]:
    """Fetch the raw set list from Scryfall."""
    settings = settings or default_settings
    url = url or settings.scryfall_sets_url
    try:
        async with get_external_client(settings) as client:
            response = await client.get(url, headers=SCRYFALL_HEADERS)
            response.raise_for_status()
            payload = response.json()
    except httpx.HTTPStatusError as exc:
        logger.error(f"Scryfall sets HTTP error: {exc.response.status_code}")
        raise CatalogUnavailable("Failed to load Scryfall sets") from exc
    except httpx.HTTPError as exc:
        logger.error(f"Scryfall sets request failed: {exc}")
        raise CatalogUnavailable("Failed to load Scryfall sets") from exc
    except ValueError as exc:
        logger.error(f"Scryfall sets returned invalid JSON: {exc}")
        raise CatalogUnavailable("Failed to load Scryfall sets") from exc

    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list):
        raise CatalogUnavailable("Scryfall sets payload has no data list")
    return data


def build_set_records(raw_sets: List[Dict[str, Any]]) -> List[SetRecord]:
    """Map raw Scryfall sets to records and append the alias list."""
    records: List[SetRecord] = []
    for raw in raw_sets:
        if not isinstance(raw, dict):
            logger.warning(f"Skipping malformed Scryfall set entry: {raw!r:.80}")
            continue
        name = raw.get("name") or ""
        records.append(
            SetRecord(
                code=(raw.get("code") or "").lower(),
                name=name,
                normalized_name=normalize(name),
                released_at=raw.get("released_at") or UNKNOWN_RELEASE_DATE,
            )
        )

    for code, name in SET_ALIASES:
        records.append(
            SetRecord(
                code=code,
                name=name,
                normalized_name=normalize(name),
                released_at=ALIAS_RELEASE_DATE,
            )
        )
    return records


class SetCatalogService:
    """Service owning the cached set catalog."""

    def __init__(
        self,
        fetcher: Optional[SetFetcher] = None,
        ttl_seconds: Optional[float] = None,
        timer: Callable[[], float] = time.time,
    ):
        self._fetcher = fetcher or fetch_scryfall_sets
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else default_settings.sets_cache_ttl
        self._timer = timer
        self._cache: TTLCache = TTLCache(maxsize=1, ttl=self.ttl_seconds, timer=timer)
        self.fetched_at: Optional[float] = None
        self.fetch_count = 0

    async def get_catalog(self) -> List[SetRecord]:
        """Return the cached catalog, refreshing it once the TTL has elapsed."""
        cached = self._cache.get(_CATALOG_KEY)
        if cached is not None:
            return cached

        logger.info("Set catalog missing or stale - fetching from Scryfall...")
        self.fetch_count += 1
        raw_sets = await self._fetcher()
        records = build_set_records(raw_sets)

        self._cache[_CATALOG_KEY] = records
        self.fetched_at = self._timer()
        logger.info(f"Set catalog refreshed: {len(records)} sets ({len(SET_ALIASES)} aliases)")
        return records

    def cache_info(self) -> Dict[str, Any]:
        """Get information about the current cache."""
        cached = self._cache.get(_CATALOG_KEY)
        return {
            "cached": cached is not None,
            "fetched_at": datetime.fromtimestamp(self.fetched_at, tz=timezone.utc).isoformat() if self.fetched_at else None,
            "set_count": len(cached) if cached else 0,
            "ttl_seconds": self.ttl_seconds,
        }

"""Natural-language to Scryfall syntax conversion."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from sna.errors import (
    CatalogUnavailable,
    CompletionFailed,
    IdentityRejected,
    IdentityRequired,
    InputInvalid,
    QuotaExceeded,
    UpstreamUnavailable,
)
from sna.instructions import build_instructions
from sna.models import SetCandidate
from sna.services.completion import CompletionClient
from sna.services.licenses import LicenseStore
from sna.services.rate_limiter import RateDecision, RateLimiter
from sna.services.set_catalog import SetCatalogService
from sna.services.set_resolver import DEFAULT_CANDIDATE_LIMIT, resolve_set_candidates
from sna.utils.set_codes import extract_explicit_set_code

logger = logging.getLogger(__name__)
auth_logger = logging.getLogger("sna.auth")


@dataclass(frozen=True)
class ConversionResult:
    syntax: str
    rate: RateDecision
    explicit_code: Optional[str] = None
    candidate_codes: tuple = ()


class ConversionService:
    """Gate a query behind license and quota checks, then convert it."""

    def __init__(
        self,
        licenses: LicenseStore,
        rate_limiter: RateLimiter,
        catalog: SetCatalogService,
        completion: CompletionClient,
        instructions: str,
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
    ):
        self.licenses = licenses
        self.rate_limiter = rate_limiter
        self.catalog = catalog
        self.completion = completion
        self.instructions = instructions
        self.candidate_limit = candidate_limit

    async def convert(
        self,
        query: Optional[str],
        identity: Optional[str],
        provider: Optional[str] = None,
    ) -> ConversionResult:
        """Convert ``query`` for ``identity``.

        Checks run in order identity present (401), query present (400),
        identity licensed (403), quota (429), so a slot is only consumed by a
        request that can actually be served. Catalog and completion failures
        become ``UpstreamUnavailable`` (502).
        """
        if not identity:
            raise IdentityRequired("License key required", headers=self.rate_limiter.fresh_headers())
        if not query or not query.strip():
            raise InputInvalid("Query is required", headers=self.rate_limiter.fresh_headers())
        if not await self.licenses.is_valid(identity):
            auth_logger.warning(f"Rejected unknown license key {identity[:4]}...")
            raise IdentityRejected("Invalid license key", headers=self.rate_limiter.fresh_headers())

        decision = self.rate_limiter.admit(identity)
        rate_headers = self.rate_limiter.headers_for(decision)
        if not decision.admitted:
            raise QuotaExceeded(
                decision.limit,
                self.rate_limiter.seconds_until(decision.reset_at),
                headers=rate_headers,
            )

        explicit_code = extract_explicit_set_code(query)
        candidates: List[SetCandidate] = []
        if explicit_code is None:
            try:
                catalog = await self.catalog.get_catalog()
            except CatalogUnavailable as exc:
                logger.error(f"Set catalog unavailable: {exc}")
                raise UpstreamUnavailable("Set catalog temporarily unavailable", headers=rate_headers) from exc
            candidates = resolve_set_candidates(query, catalog, self.candidate_limit)

        instructions = build_instructions(self.instructions, explicit_code, candidates)

        try:
            syntax = await self.completion.complete(instructions, query, provider)
        except CompletionFailed as exc:
            raise UpstreamUnavailable(str(exc), headers=rate_headers) from exc

        logger.info(f'[{identity[:8]}...] "{query}" → "{syntax}"')
        return ConversionResult(
            syntax=syntax,
            rate=decision,
            explicit_code=explicit_code,
            candidate_codes=tuple(c.code for c in candidates),
        )

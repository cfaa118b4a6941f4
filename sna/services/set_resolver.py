"""Fuzzy set-name resolution against the cached catalog."""
from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from sna.models import SetCandidate, SetRecord
from sna.utils.text import normalize, tighten

logger = logging.getLogger(__name__)

SUBSTRING_SCORE = 100
DEFAULT_CANDIDATE_LIMIT = 6


def score_match(query_norm: str, name_norm: str) -> int:
    """Score a normalized set name against a normalized query.

    A name contained in the query scores 100; otherwise the score is the
    number of name tokens that also appear in the query. An empty name
    (e.g. "Masters Edition" once tightened) never matches.
    """
    if not name_norm:
        return 0
    if name_norm in query_norm:
        return SUBSTRING_SCORE
    query_tokens = set(query_norm.split())
    return sum(1 for token in set(name_norm.split()) if token in query_tokens)


def resolve_set_candidates(
    query: str,
    catalog: Sequence[SetRecord],
    limit: int = DEFAULT_CANDIDATE_LIMIT,
) -> List[SetCandidate]:
    """Return up to ``limit`` sets the query plausibly refers to, best first.

    Each set is scored twice, once on the plain normalized strings and once
    with generic words ("masters", "collection", ...) removed from both
    sides, and keeps the better score. Sets sharing a code collapse to their
    best-scoring entry. Ties are broken by release date, newest first, which
    puts hand-curated aliases ahead of everything else.
    """
    query_norm = normalize(query)
    if not query_norm:
        return []
    query_tight = tighten(query_norm)

    best_by_code: Dict[str, SetCandidate] = {}
    for record in catalog:
        score = max(
            score_match(query_norm, record.normalized_name),
            score_match(query_tight, tighten(record.normalized_name)),
        )
        if score < 1:
            continue
        previous = best_by_code.get(record.code)
        if previous is None or score > previous.score:
            best_by_code[record.code] = SetCandidate(**record.model_dump(), score=score)

    ranked = sorted(best_by_code.values(), key=lambda c: c.released_at, reverse=True)
    ranked.sort(key=lambda c: c.score, reverse=True)

    logger.debug(f"Resolved {len(ranked)} set candidates for query '{query_norm}'")
    return ranked[:limit]

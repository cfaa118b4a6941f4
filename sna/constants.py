"""Shared constants and regular expressions for the Scryfall NLP API."""
from __future__ import annotations

import re
from typing import Dict, FrozenSet, List, Tuple

API_VERSION = "2.0.0"
SERVICE_NAME = "Scryfall NLP API"

SCRYFALL_HEADERS = {
    "User-Agent": f"ScryfallNLP/{API_VERSION}",
    "Accept": "application/json",
}

# Hand-curated sets that are commonly confused with one another. They are
# appended to the fetched catalog with a release date that sorts after every
# real set.
SET_ALIASES: List[Tuple[str, str]] = [
    ("cmm", "commander masters"),
    ("cma", "commander anthology"),
    ("mm2", "modern masters 2015"),
    ("mh2", "modern horizons 2"),
    ("2xm", "double masters"),
    ("dom", "dominaria"),
    ("dmu", "dominaria united"),
]
ALIAS_RELEASE_DATE = "9999-99-99"
UNKNOWN_RELEASE_DATE = "0000-00-00"

SET_NAME_STOP_WORDS: FrozenSet[str] = frozenset(
    {"the", "set", "edition", "masters", "anthology", "collection", "series"}
)

NON_ALNUM_RUN_RE = re.compile(r"[^a-z0-9]+")
PAREN_SET_CODE_RE = re.compile(r"\(\s*([A-Za-z0-9]{2,5})\s*\)")
LABELLED_SET_CODE_RE = re.compile(r"\b(?:set|code)\s*[:=]?\s*([A-Za-z0-9]{2,5})\b", re.IGNORECASE)

LICENSE_KEY_PREFIX = "SCRY"
LICENSE_KEY_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

CHECKOUT_COMPLETED_EVENT = "checkout.session.completed"

# Routes whose responses always carry RateLimit-* headers
RATE_LIMITED_PATHS: FrozenSet[str] = frozenset({"/convert", "/validate-identity"})

PROVIDER_LABELS: Dict[str, str] = {
    "openai": "OpenAI",
    "anthropic": "Anthropic",
}

__all__ = [
    "API_VERSION",
    "SERVICE_NAME",
    "SCRYFALL_HEADERS",
    "SET_ALIASES",
    "ALIAS_RELEASE_DATE",
    "UNKNOWN_RELEASE_DATE",
    "SET_NAME_STOP_WORDS",
    "NON_ALNUM_RUN_RE",
    "PAREN_SET_CODE_RE",
    "LABELLED_SET_CODE_RE",
    "LICENSE_KEY_PREFIX",
    "LICENSE_KEY_ALPHABET",
    "CHECKOUT_COMPLETED_EVENT",
    "RATE_LIMITED_PATHS",
    "PROVIDER_LABELS",
]

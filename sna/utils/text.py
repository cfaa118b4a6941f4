"""Name normalization shared by the set catalog and the resolver."""
from __future__ import annotations

from typing import Any

from sna.constants import NON_ALNUM_RUN_RE, SET_NAME_STOP_WORDS


def normalize(value: Any) -> str:
    """Lower-case and collapse every run of non-alphanumerics to one space.

    ``normalize("Commander's Masters!")`` -> ``"commander s masters"``.
    Idempotent; ``None`` normalizes to ``""``.
    """
    if value is None:
        return ""
    return NON_ALNUM_RUN_RE.sub(" ", str(value).lower()).strip()


def tighten(normalized: str) -> str:
    """Drop generic set-name words from an already normalized string."""
    return " ".join(token for token in normalized.split() if token not in SET_NAME_STOP_WORDS)

"""Explicit set-code extraction from free-form queries."""
from __future__ import annotations

from typing import Optional

from sna.constants import LABELLED_SET_CODE_RE, PAREN_SET_CODE_RE


def extract_explicit_set_code(query: Optional[str]) -> Optional[str]:
    """Return a set code the user spelled out, lower-cased.

    Recognises ``"... (CMM)"`` first, then ``"set: cmm"`` / ``"code=cmm"``
    style labels. Returns ``None`` when the query names no code.
    """
    if not query:
        return None

    match = PAREN_SET_CODE_RE.search(query) or LABELLED_SET_CODE_RE.search(query)
    if match is None:
        return None
    return match.group(1).lower()

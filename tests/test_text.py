import re

import pytest

from sna.utils.text import normalize, tighten

NORMALIZED_RE = re.compile(r"^[a-z0-9]*( [a-z0-9]+)*$")


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Dominaria", "dominaria"),
        ("  Commander's   Masters!! ", "commander s masters"),
        ("Modern Horizons 2", "modern horizons 2"),
        ("Ravnica: Clue Edition", "ravnica clue edition"),
        ("---", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_collapses_punctuation_and_case(raw, expected):
    assert normalize(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["Legendary ELVES from Dominaria", "  (CMM) set:cmm ", "Æther Revolt", "a\tb\nc", "x--y__z", "123"],
)
def test_normalize_is_idempotent_and_canonical(raw):
    once = normalize(raw)
    assert normalize(once) == once
    assert NORMALIZED_RE.match(once)


def test_tighten_drops_generic_words_only_as_whole_tokens():
    assert tighten("the commander masters collection") == "commander"
    assert tighten("masters edition") == ""
    assert tighten("settlers of theros") == "settlers of theros"
    assert tighten("modern horizons 2") == "modern horizons 2"

import pytest

from sna.utils.set_codes import extract_explicit_set_code


@pytest.mark.parametrize(
    "query,expected",
    [
        ("legendary creatures (CMM)", "cmm"),
        ("legendary creatures ( mh2 )", "mh2"),
        ("elves set: DOM", "dom"),
        ("elves set=dmu", "dmu"),
        ("goblins SET 2XM", "2xm"),
        ("angels code:cma", "cma"),
        ("dragons (M21) set: dom", "m21"),
    ],
)
def test_extracts_explicit_codes(query, expected):
    assert extract_explicit_set_code(query) == expected


@pytest.mark.parametrize(
    "query",
    ["blue dinosaurs", "legendary elves from Dominaria", "offset costs", "(abcdef)", "", None],
)
def test_no_code_when_none_is_spelled_out(query):
    assert extract_explicit_set_code(query) is None


@pytest.mark.parametrize(
    "query,expected",
    [
        ("creatures from the setting sun", "ting"),
        ("a set with dragons", "with"),
    ],
)
def test_label_match_is_loose_about_word_boundaries(query, expected):
    # Known false positives; the resolver gets skipped for these queries
    assert extract_explicit_set_code(query) == expected

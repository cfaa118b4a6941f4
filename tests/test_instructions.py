import pytest

from sna.instructions import INSTRUCTIONS_V2, build_instructions, get_instruction_template
from sna.models import SetCandidate


def _candidate(code, name, score=100):
    return SetCandidate(code=code, name=name, normalized_name=name.lower(), released_at="2020-01-01", score=score)


def test_default_template_separates_keywords_from_oracle_text():
    template = get_instruction_template()

    assert template is INSTRUCTIONS_V2
    assert "kw:<keyword>" in template
    assert "o:<text>" in template


def test_unknown_template_version_is_rejected():
    with pytest.raises(ValueError):
        get_instruction_template("0")


def test_no_candidates_leaves_base_untouched():
    assert build_instructions("BASE") == "BASE"


def test_explicit_code_directive():
    result = build_instructions("BASE", explicit_code="cmm", candidates=[_candidate("cma", "Commander Anthology")])

    assert result.startswith("BASE\n\nRESOLVED SET CODES (STRICT)")
    assert "- explicit: s:cmm" in result
    assert "s:cma" not in result


def test_single_candidate_is_mandated():
    result = build_instructions("BASE", candidates=[_candidate("dom", "Dominaria")])

    assert '- "Dominaria" -> s:dom' in result
    assert "Always use s:dom for this request." in result
    assert "CANDIDATE SETS" not in result


def test_several_candidates_form_a_closed_list():
    result = build_instructions(
        "BASE",
        candidates=[_candidate("cmm", "Commander Masters"), _candidate("cma", "Commander Anthology", score=1)],
    )

    assert "CANDIDATE SETS (CHOOSE ONLY FROM THESE IF A SET IS IMPLIED)" in result
    assert "- s:cmm - Commander Masters" in result
    assert "- s:cma - Commander Anthology" in result
    assert "Do NOT invent other set codes" in result
    assert "cmm ≠ cma" in result
    assert "RESOLVED SET CODES" not in result

"""Instruction templates and set-code directive blocks for the completion call."""
from __future__ import annotations

from typing import Dict, Optional, Sequence

from sna.models import SetCandidate

INSTRUCTIONS_V2 = """You are a Scryfall search syntax converter. Convert natural language to valid Scryfall syntax.

OUTPUT RULES:
- Output ONLY the search syntax
- No explanations, quotes, or extra text
- Use exact operators as shown below

COLORS:
c:w (white) c:u (blue) c:b (black) c:r (red) c:g (green)
c:colorless (colorless cards)

CARD TYPES:
t:creature t:instant t:sorcery t:artifact t:enchantment t:planeswalker t:land
t:legendary (legendary supertype)
Creature subtypes: t:dinosaur t:dragon t:elf t:goblin t:zombie t:vampire t:angel t:demon

KEYWORD ABILITIES (IMPORTANT)
- Use kw:<keyword> (alias: keyword:<keyword>) for actual keyword abilities.
  Examples: kw:flying kw:first strike kw:deathtouch kw:lifelink kw:menace kw:trample kw:haste kw:vigilance kw:hexproof
- Use o:<text> only for literal words/phrases appearing in the rules text.
  Examples: o:"draw a card" o:destroy o:exile
- If the user says "with flying / has flying / keyword flying", use kw:flying.
- If the user says "cards that say 'flying' in the text", use o:flying.

ORACLE TEXT:
o:"draw a card" (exact phrases in quotes)
o:destroy o:exile o:counter

MANA VALUE:
mv:3 (exactly 3)
mv>=4 (4 or more)
mv<=2 (2 or less)

POWER/TOUGHNESS:
pow:3 pow>5 pow<6 pow>=4 pow<=2
tou:4 tou>3 tou<6 tou>=2 tou<=5

FORMAT LEGALITY:
f:standard f:modern f:pioneer f:commander f:legacy f:vintage f:pauper

SETS:
s:<code> (lowercase 3-5 letters, e.g., s:cmm)

RARITY:
r:c r:u r:r r:m

PRICES:
usd>=5 usd<=10

BOOLEAN LOGIC:
Space = AND
OR with parens: (c:w OR c:u)
NOT: -t:creature

SET SELECTION:
- If "RESOLVED SET CODES" or "CANDIDATE SETS" appear below, follow them strictly.
- If only a set NAME is provided (no code), choose the best official set code for that name. Never confuse lookalikes (cmm≠cma, mm2≠mh2, 2xm≠mm2).

EXAMPLES:
"blue dinosaurs" → t:dinosaur c:u
"green dinosaurs with toughness less than 6" → t:dinosaur c:g tou<6
"red dragons with flying" → t:dragon c:r kw:flying
"black zombies modern legal power 2-5" → t:zombie c:b f:modern pow>2 pow<5
"legendary elves from Dominaria" → t:legendary t:elf s:dom
"cheap red removal" → c:r (o:destroy OR o:exile) mv<=3
"white or blue angels" → t:angel (c:w OR c:u)

Output syntax only."""

INSTRUCTION_TEMPLATES: Dict[str, str] = {
    "2": INSTRUCTIONS_V2,
}
DEFAULT_INSTRUCTION_VERSION = "2"


def get_instruction_template(version: Optional[str] = None) -> str:
    """Return the base instructions for ``version``."""
    version = version or DEFAULT_INSTRUCTION_VERSION
    try:
        return INSTRUCTION_TEMPLATES[version]
    except KeyError:
        raise ValueError(
            f"Unknown instruction version '{version}'. Available: {', '.join(sorted(INSTRUCTION_TEMPLATES))}"
        ) from None


def explicit_code_directive(code: str) -> str:
    return (
        "\n\nRESOLVED SET CODES (STRICT)\n"
        f"- explicit: s:{code}\n"
        "Rules:\n"
        f"- Always use s:{code} when selecting a set code.\n"
    )


def resolved_set_directive(candidate: SetCandidate) -> str:
    return (
        "\n\nRESOLVED SET CODES (STRICT)\n"
        f'- "{candidate.name}" -> s:{candidate.code}\n'
        "Rules:\n"
        f"- Always use s:{candidate.code} for this request.\n"
    )


def candidate_sets_directive(candidates: Sequence[SetCandidate]) -> str:
    lines = "\n".join(f"- s:{c.code} - {c.name}" for c in candidates)
    return (
        "\n\nCANDIDATE SETS (CHOOSE ONLY FROM THESE IF A SET IS IMPLIED)\n"
        f"{lines}\n"
        "\n"
        "Rules:\n"
        "- If a set is requested by name, choose the best match from the list above.\n"
        "- Do NOT invent other set codes. If none fit, omit the set filter.\n"
        "- Never confuse visually similar codes (e.g., cmm ≠ cma, mm2 ≠ mh2, 2xm ≠ mm2).\n"
    )


def build_instructions(
    base: str,
    explicit_code: Optional[str] = None,
    candidates: Sequence[SetCandidate] = (),
) -> str:
    """Append the set directive that matches what was resolved for the query.

    An explicit code wins outright. Otherwise one candidate is mandated, several
    are offered as a closed list, and none leaves the base instructions alone.
    """
    if explicit_code:
        return base + explicit_code_directive(explicit_code)
    if len(candidates) == 1:
        return base + resolved_set_directive(candidates[0])
    if len(candidates) > 1:
        return base + candidate_sets_directive(candidates)
    return base

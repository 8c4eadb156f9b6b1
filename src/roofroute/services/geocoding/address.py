"""Address clean-up used for the second geocoding attempt."""

from __future__ import annotations

import re

STREET_TYPE_ABBREVIATIONS: dict[str, str] = {
    "rd": "Road",
    "st": "Street",
    "ave": "Avenue",
    "av": "Avenue",
    "blvd": "Boulevard",
    "dr": "Drive",
    "ln": "Lane",
    "ct": "Court",
    "pl": "Place",
    "pkwy": "Parkway",
    "hwy": "Highway",
    "cir": "Circle",
    "ter": "Terrace",
    "trl": "Trail",
    "sq": "Square",
    "expy": "Expressway",
    "fwy": "Freeway",
}

UNIT_DESIGNATORS = ("unit", "suite", "ste", "apt", "apartment", "bldg", "building", "rm", "room", "floor")

_PARENTHETICAL = re.compile(r"\([^)]*\)")
_UNIT_TOKEN = re.compile(
    r"\b(?:" + "|".join(UNIT_DESIGNATORS) + r")\b\.?(?:\s*#?\s*[\w-]+)?",
    re.IGNORECASE,
)
_HASH_UNIT = re.compile(r"#\s*[\w-]+")
_STREET_TYPE = re.compile(
    r"\b(" + "|".join(sorted(STREET_TYPE_ABBREVIATIONS, key=len, reverse=True)) + r")\b\.?",
    re.IGNORECASE,
)
_SPACE_BEFORE_COMMA = re.compile(r"\s+,")
_REPEATED_COMMAS = re.compile(r",(?:\s*,)+")
_WHITESPACE = re.compile(r"\s+")
_EDGE_PUNCTUATION = " ,.;:-#"


def _expand(match: re.Match) -> str:
    return STREET_TYPE_ABBREVIATIONS[match.group(1).lower()]


def simplify(address: str) -> str:
    """Strip unit designators and asides and spell out street types.

    ``"123 Main St, Bldg 4, Suite 201"`` becomes ``"123 Main Street"``. Words that
    are already spelled out are left alone, so applying this twice changes nothing.
    """

    text = _PARENTHETICAL.sub(" ", address or "")
    text = _UNIT_TOKEN.sub(" ", text)
    text = _HASH_UNIT.sub(" ", text)
    text = _STREET_TYPE.sub(_expand, text)
    text = _SPACE_BEFORE_COMMA.sub(",", text)
    text = _REPEATED_COMMAS.sub(",", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip(_EDGE_PUNCTUATION)

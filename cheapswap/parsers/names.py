"""
Card name normalization.

Two different jobs:
- normalize_name: comparable form for identity checks, never displayed
- clean_card_name: strips decklist annotations, keeps display casing
"""

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# Trailing annotations stripped from decklist names, in order:
# "Sol Ring *F*", "Sol Ring 263", "Sol Ring (C21)"
_FOIL_MARKER = re.compile(r"\s*\*F\*\s*$", re.IGNORECASE)
_TRAILING_NUMBER = re.compile(r"\s+\d+\s*$")
_SET_CODE = re.compile(r"\s*\([A-Z0-9]{2,6}\)\s*$", re.IGNORECASE)

_ANNOTATIONS = (_FOIL_MARKER, _TRAILING_NUMBER, _SET_CODE)


def normalize_name(name: str | None) -> str:
    """
    Lowercase and collapse punctuation so names compare equal.

    "Jace, the Mind Sculptor" -> "jace the mind sculptor"
    """
    return _NON_ALNUM.sub(" ", (name or "").lower()).strip()


def _strip_annotations(name: str) -> str:
    for pattern in _ANNOTATIONS:
        name = pattern.sub("", name).strip()
    return name


def clean_card_name(raw: str | None) -> str:
    """
    Remove trailing foil markers, collector numbers and set codes.

    Export formats stack these in different orders
    ("Sol Ring 263 (C21)" vs "Sol Ring (C21) 263 *F*"), so the strip pass
    repeats until nothing changes. That makes the function idempotent.

    Examples:
        "Sol Ring (C21) 263 *F*" -> "Sol Ring"
        "Arcane Signet" -> "Arcane Signet"
    """
    name = (raw or "").strip()
    while True:
        cleaned = _strip_annotations(name)
        if cleaned == name:
            return cleaned
        name = cleaned

"""
Parser for plain-text decklists.

Supports:
- "3 Sol Ring", "3x Sol Ring", "3X Sol Ring"
- Bare names ("Swords to Plowshares"), counted once
- Arena/Moxfield style annotations ("1 Sol Ring (C21) 263 *F*")
- Comment lines starting with "#" or "//"
"""

import re

from cheapswap.models.decklist import DecklistEntry
from cheapswap.parsers.names import clean_card_name

# Pattern: "4 Lightning Bolt" or "4x Lightning Bolt" or "4 x Lightning Bolt"
# Groups: (quantity, card_name)
QUANTITY_PATTERN = re.compile(r"^(\d+)\s*x?\s+(.+)$", re.IGNORECASE)

_LINE_BREAK = re.compile(r"\r?\n")

COMMENT_PREFIXES = ("#", "//")


def _parse_line(line: str) -> DecklistEntry | None:
    match = QUANTITY_PATTERN.match(line)
    if match and int(match.group(1)) > 0:
        quantity = int(match.group(1))
        name = clean_card_name(match.group(2))
    else:
        quantity = 1
        name = clean_card_name(line)

    if not name:
        return None
    return DecklistEntry(quantity=quantity, name=name, raw_line=line)


def parse_decklist(text: str) -> list[DecklistEntry]:
    """
    Parse decklist text into entries.

    Duplicate names are NOT merged; each line is its own entry.

    Args:
        text: Raw decklist, one card per line

    Returns:
        Entries in input order. Blank and comment lines produce nothing.
    """
    entries: list[DecklistEntry] = []

    for line in _LINE_BREAK.split(text or ""):
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue

        entry = _parse_line(line)
        if entry is not None:
            entries.append(entry)

    return entries


def format_decklist(cards: list[tuple[int, str]]) -> str:
    """Render (quantity, name) pairs in the format parse_decklist accepts."""
    return "\n".join(f"{quantity} {name}" for quantity, name in cards)

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DecklistEntry:
    """
    One line of a parsed decklist.

    Attributes:
        quantity: Number of copies (always positive)
        name: Cleaned card name, ready for catalog lookup
        raw_line: The trimmed source line, kept for display
    """

    quantity: int
    name: str
    raw_line: str

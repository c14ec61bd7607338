"""
Oracle text tokenizer.

Reduces rules text to the set of words that say what a card does.
Function words and generic game nouns ("target", "creature",
"battlefield") appear on almost every card, so they are dropped.
"""

import re

from cheapswap.models.card import Card

MIN_TOKEN_LENGTH = 4

STOPWORDS: frozenset[str] = frozenset(
    {
        # Function words
        "the", "a", "an", "and", "or", "to", "of", "in", "on", "for", "with",
        "without", "from", "into", "until", "as", "this", "that", "those",
        "these", "it", "its", "their", "your", "you", "they", "them", "each",
        "any", "all", "at", "by", "is", "are", "was", "were", "be", "been",
        "being", "if", "then", "may", "can", "cannot", "can't", "have", "has",
        "had", "do", "does", "did", "when", "whenever", "where", "while",
        "during", "after", "before", "next",
        # Generic rules nouns
        "target", "targets", "player", "players", "opponent", "opponents",
        "creature", "creatures", "card", "cards", "spell", "spells",
        "ability", "abilities", "control", "controls", "controlled", "owner",
        "owners", "battlefield", "graveyard", "library", "hand", "turn",
        "end", "step", "phase", "game",
    }
)  # fmt: skip

# Punctuation and brackets that separate words in rules text.
# Slashes and apostrophes stay: "+1/+1" and "can't" are single tokens.
_SEPARATORS = re.compile(r"[()\[\]{},.;:!?]")


def tokenize_text(text: str | None, stopwords: frozenset[str] = STOPWORDS) -> frozenset[str]:
    """
    Significant tokens of a piece of rules text.

    Keeps tokens that are at least MIN_TOKEN_LENGTH characters, not purely
    numeric, and not stopwords.
    """
    if not text:
        return frozenset()

    words = _SEPARATORS.sub(" ", text.lower()).split()
    return frozenset(
        word
        for word in words
        if len(word) >= MIN_TOKEN_LENGTH and not word.isdigit() and word not in stopwords
    )


def tokenize_oracle(card: Card, stopwords: frozenset[str] = STOPWORDS) -> frozenset[str]:
    """Significant tokens of a card's oracle text. Empty for cards without text."""
    return tokenize_text(card.oracle_text, stopwords)

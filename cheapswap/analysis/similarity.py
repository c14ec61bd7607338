"""
Card similarity scoring.

Score = token overlap + type family match + mana value closeness.

Scores are unbounded and only comparable within one ranking pass.
"""

from collections.abc import Set
from dataclasses import dataclass

from cheapswap.analysis.tokenizer import tokenize_oracle
from cheapswap.models.card import Card

# Checked in order; an "Artifact Creature" is a creature
TYPE_FAMILIES: tuple[str, ...] = (
    "creature",
    "instant",
    "sorcery",
    "enchantment",
    "artifact",
    "planeswalker",
    "land",
)

OTHER_FAMILY = "other"


@dataclass(frozen=True, slots=True)
class ScoringWeights:
    """
    Weights for the three similarity signals.

    Attributes:
        token_overlap: Multiplier for the Jaccard index (0..1)
        type_family: Flat bonus when type families match
        mana_value: Bonus for identical mana values
        mana_value_step: Bonus lost per point of mana value difference
    """

    token_overlap: float = 100.0
    type_family: float = 10.0
    mana_value: float = 10.0
    mana_value_step: float = 2.0


DEFAULT_WEIGHTS = ScoringWeights()


def jaccard(a: Set[str], b: Set[str]) -> float:
    """
    Jaccard index |A ∩ B| / |A ∪ B|.

    Returns 0.0 if either set is empty.
    """
    if not a or not b:
        return 0.0

    intersection = len(a & b)
    union = len(a) + len(b) - intersection
    return intersection / union if union else 0.0


def primary_type_family(type_line: str | None) -> str:
    """
    Classify a type line into exactly one family.

    Returns:
        First matching family from TYPE_FAMILIES, or "other".
    """
    lowered = (type_line or "").lower()
    for family in TYPE_FAMILIES:
        if family in lowered:
            return family
    return OTHER_FAMILY


def mana_value_closeness(
    target: Card, candidate: Card, weights: ScoringWeights = DEFAULT_WEIGHTS
) -> float:
    """Bonus for similar mana values. Zero if either value is missing."""
    if target.mana_value is None or candidate.mana_value is None:
        return 0.0

    delta = abs(target.mana_value - candidate.mana_value)
    return max(0.0, weights.mana_value - delta * weights.mana_value_step)


def similarity_score(
    target: Card,
    candidate: Card,
    target_tokens: Set[str],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> float:
    """
    How functionally similar a candidate is to a target.

    Args:
        target: Card being replaced
        candidate: Possible substitute
        target_tokens: tokenize_oracle(target), computed once per search
        weights: Signal weights

    Returns:
        Unnormalized score; higher is more similar.
    """
    score = jaccard(target_tokens, tokenize_oracle(candidate)) * weights.token_overlap

    if primary_type_family(target.type_line) == primary_type_family(candidate.type_line):
        score += weights.type_family

    score += mana_value_closeness(target, candidate, weights)

    return score

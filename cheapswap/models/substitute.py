"""
Substitute search models.

Query parameters for one substitute search, the ranked candidates it
produces, and the per-entry rows of a full deck analysis.
"""

import math
from dataclasses import dataclass, field
from typing import Any

from cheapswap.config import DEFAULT_MAX_PRICE, DEFAULT_MAX_RESULTS, MIN_PRICE_CAP
from cheapswap.models.card import Card


def coerce_price(value: Any, default: float = DEFAULT_MAX_PRICE) -> float:
    """
    Turn user-supplied price input into a usable positive cap.

    Non-numeric, non-finite and non-positive values fall back to the
    default instead of failing. Positive caps below one cent are raised
    to MIN_PRICE_CAP.
    """
    try:
        price = float(value)
    except (TypeError, ValueError):
        return default

    if not math.isfinite(price) or price <= 0:
        return default
    return max(price, MIN_PRICE_CAP)


@dataclass
class SubstituteQuery:
    """
    Parameters governing one substitute search.

    Attributes:
        max_price: Highest price a candidate may have
        max_results: Maximum candidates returned
        exclude_reserved: Skip Reserved List cards
    """

    max_price: float = DEFAULT_MAX_PRICE
    max_results: int = DEFAULT_MAX_RESULTS
    exclude_reserved: bool = True

    def __post_init__(self) -> None:
        """Normalize price and result caps."""
        self.max_price = coerce_price(self.max_price)
        if not isinstance(self.max_results, int) or self.max_results < 1:
            self.max_results = DEFAULT_MAX_RESULTS


@dataclass(frozen=True, slots=True)
class ScoredCandidate:
    """
    A cheaper card ranked against a target.

    Higher scores are more similar. Ranking is (score desc, price asc).
    """

    card: Card
    price: float
    score: float

    @property
    def sort_key(self) -> tuple[float, float]:
        return (-self.score, self.price)


@dataclass
class DeckAnalysisRow:
    """
    Analysis result for one decklist entry.

    On lookup failure only quantity, name, threshold and error are set.
    On search failure the card fields are set, candidates are empty and
    search_error explains why.
    """

    quantity: int
    name: str
    threshold: float
    type_line: str | None = None
    mana_value: float | None = None
    color_identity: tuple[str, ...] = ()
    price: float | None = None
    image_url: str | None = None
    url: str | None = None
    candidates: list[ScoredCandidate] = field(default_factory=list)
    single_mode: bool = False
    error: str | None = None
    search_error: str | None = None

    @property
    def is_expensive(self) -> bool:
        """True if the card's price reached the analysis threshold."""
        return self.price is not None and self.price >= self.threshold


@dataclass
class DeckAnalysis:
    """Ordered per-entry results of a deck analysis."""

    rows: list[DeckAnalysisRow] = field(default_factory=list)
    single_mode: bool = False

    @property
    def failed_count(self) -> int:
        """Entries whose lookup failed."""
        return sum(1 for row in self.rows if row.error)

    @property
    def candidate_count(self) -> int:
        return sum(len(row.candidates) for row in self.rows)


@dataclass
class CardSearchResult:
    """Substitutes for a single queried card."""

    card: Card
    price: float | None
    max_price: float
    candidates: list[ScoredCandidate] = field(default_factory=list)

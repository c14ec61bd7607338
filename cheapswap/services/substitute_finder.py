"""
Substitute finder.

Finds cheaper cards that do something similar to a target card:
same format legality, colors within the target's identity, cheaper
than a price cap, ranked by oracle text similarity.

INVARIANTS:
1. A candidate is never the same logical card as its target
   (same oracle id, same prints group, or same normalized name)
2. Every returned price is finite, positive and <= max_price
3. Ranking is (score desc, price asc); dedup keeps the best-ranked printing
4. Zero substitutes is an empty list; only fetch failures raise
"""

import logging

import httpx

from cheapswap.analysis.similarity import DEFAULT_WEIGHTS, ScoringWeights, similarity_score
from cheapswap.analysis.tokenizer import tokenize_oracle
from cheapswap.config import settings
from cheapswap.models.card import Card, lowest_price
from cheapswap.models.failure import CatalogSearchError, SubstituteSearchError
from cheapswap.models.substitute import ScoredCandidate, SubstituteQuery
from cheapswap.parsers.names import normalize_name
from cheapswap.services.catalog_client import search_many

logger = logging.getLogger(__name__)


def is_same_card_or_printing(target: Card, candidate: Card) -> bool:
    """
    True if two cards are the same logical card.

    Any of these is enough:
    - Shared oracle id
    - Shared prints group
    - Equal names after normalization
    """
    if target.oracle_id and target.oracle_id == candidate.oracle_id:
        return True
    if target.prints_search_uri and target.prints_search_uri == candidate.prints_search_uri:
        return True
    return normalize_name(target.name) == normalize_name(candidate.name)


def identity_key(card: Card) -> str:
    """Stable dedup key: oracle id, else prints group, else printing id."""
    return card.oracle_id or card.prints_search_uri or card.id


def color_identity_clause(color_identity: tuple[str, ...]) -> str:
    """
    Scryfall clause restricting candidates to the target's colors.

    Colorless targets only admit colorless candidates.
    """
    if not color_identity:
        return "id:c"
    return f"id<={''.join(color_identity).lower()}"


def format_price(value: float) -> str:
    """Render a price for a query: 10 -> "10", 2.5 -> "2.5", 0.249 -> "0.25"."""
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _quote_name(name: str) -> str:
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_search_query(target: Card, query: SubstituteQuery) -> str:
    """
    Build the Scryfall search expression for a substitute pool.

    Clauses are whitespace-joined (implicit AND). The oracle id and exact
    name exclusions only shrink the pool; the in-process identity check
    in find_substitutes is authoritative.

    Example:
        f:commander game:paper id<=u usd<=10 usd>0 -oracleid:abc -!"Rhystic Study" -is:reserved
    """
    parts = [
        f"f:{settings.legality_format}",
        "game:paper",
        color_identity_clause(target.color_identity),
        f"usd<={format_price(query.max_price)}",
        "usd>0",
    ]

    if target.oracle_id:
        parts.append(f"-oracleid:{target.oracle_id}")

    parts.append(f"-!{_quote_name(target.name)}")

    if query.exclude_reserved:
        parts.append("-is:reserved")

    return " ".join(parts)


def score_pool(
    target: Card,
    pool: list[Card],
    max_price: float,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> list[ScoredCandidate]:
    """
    Filter and score a candidate pool against a target.

    Drops the target's own printings, cards without a usable price and
    cards above max_price.

    Returns:
        Surviving candidates sorted by (score desc, price asc)
    """
    target_tokens = tokenize_oracle(target)
    scored: list[ScoredCandidate] = []

    for card in pool:
        if is_same_card_or_printing(target, card):
            continue

        price = lowest_price(card)
        if price is None or price > max_price:
            continue

        score = similarity_score(target, card, target_tokens, weights)
        scored.append(ScoredCandidate(card=card, price=price, score=score))

    scored.sort(key=lambda c: c.sort_key)
    return scored


def select_ranked(
    target: Card,
    ranked: list[ScoredCandidate],
    max_results: int,
) -> list[ScoredCandidate]:
    """
    Deduplicate a ranked list by identity and cap its length.

    The first (best-ranked) printing of each logical card wins.
    """
    seen: set[str] = set()
    selected: list[ScoredCandidate] = []

    for candidate in ranked:
        key = identity_key(candidate.card)
        if key in seen:
            continue
        seen.add(key)

        if normalize_name(candidate.card.name) == normalize_name(target.name):
            continue

        selected.append(candidate)
        if len(selected) >= max_results:
            break

    return selected


async def find_substitutes(
    target: Card,
    query: SubstituteQuery | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> list[ScoredCandidate]:
    """
    Find cheaper, functionally similar substitutes for a card.

    Args:
        target: Card to replace
        query: Price cap, result cap and Reserved List handling
        client: Optional httpx client for connection reuse
        weights: Similarity weights

    Returns:
        Up to query.max_results candidates, best first. Possibly empty.

    Raises:
        SubstituteSearchError: If the candidate pool could not be fetched
    """
    if query is None:
        query = SubstituteQuery()

    search = build_search_query(target, query)
    logger.info("Searching substitutes for %s (cap $%.2f)", target.name, query.max_price)

    try:
        pool = await search_many(search, settings.candidate_pool_size, client=client)
    except CatalogSearchError as e:
        logger.warning("Substitute search failed for %s: %s", target.name, e)
        raise SubstituteSearchError(target.name, detail=e.message) from e

    ranked = score_pool(target, pool, query.max_price, weights)
    selected = select_ranked(target, ranked, query.max_results)

    logger.info(
        "Found %d substitutes for %s from a pool of %d", len(selected), target.name, len(pool)
    )
    return selected

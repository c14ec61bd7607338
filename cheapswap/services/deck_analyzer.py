"""
Deck analysis.

Resolves every decklist entry against Scryfall and, for expensive cards,
finds cheaper substitutes.

Batch mode caps each search just below the card's own price. A decklist
with exactly one entry runs in single-card mode instead: the search uses
an independent, user-chosen price cap whatever the card costs.

Per-entry failures never abort the batch:
- Lookup failure: row carries `error`, no candidates
- Search failure: row keeps the resolved card, carries `search_error`
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from cheapswap.config import (
    DEFAULT_MAX_PRICE,
    DEFAULT_MAX_RESULTS,
    MAX_SEARCH_RESULTS,
    MIN_BATCH_PRICE_CAP,
)
from cheapswap.models.card import Card, lowest_price
from cheapswap.models.decklist import DecklistEntry
from cheapswap.models.failure import CardLookupError, SubstituteSearchError
from cheapswap.models.substitute import (
    CardSearchResult,
    DeckAnalysis,
    DeckAnalysisRow,
    ScoredCandidate,
    SubstituteQuery,
    coerce_price,
)
from cheapswap.parsers.decklist import parse_decklist
from cheapswap.services.catalog_client import lookup_by_name, open_client
from cheapswap.services.substitute_finder import find_substitutes

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


@dataclass
class AnalysisOptions:
    """
    Knobs for a deck analysis.

    Attributes:
        price_threshold: Cards priced at or above this get substitutes (batch mode)
        max_candidates: Substitutes kept per card
        exclude_reserved: Skip Reserved List cards
        single_card_max_price: Price cap used in single-card mode
    """

    price_threshold: float = 0.0
    max_candidates: int = 8
    exclude_reserved: bool = True
    single_card_max_price: float = DEFAULT_MAX_PRICE


def batch_price_cap(price: float) -> float:
    """Cap for a batch search: one cent under the card, never below the floor."""
    return max(MIN_BATCH_PRICE_CAP, price - 0.01)


def _report(on_progress: ProgressCallback | None, message: str) -> None:
    logger.info(message)
    if on_progress is not None:
        on_progress(message)


def _row_for_card(
    entry: DecklistEntry, card: Card, threshold: float, single_mode: bool
) -> DeckAnalysisRow:
    return DeckAnalysisRow(
        quantity=entry.quantity,
        name=card.name,
        threshold=threshold,
        type_line=card.type_line,
        mana_value=card.mana_value,
        color_identity=card.color_identity,
        price=lowest_price(card),
        image_url=card.image_url,
        url=card.scryfall_uri,
        single_mode=single_mode,
    )


def _query_for_row(
    row: DeckAnalysisRow, options: AnalysisOptions, single_mode: bool
) -> SubstituteQuery | None:
    """Search parameters for a row, or None if the card needs no substitutes."""
    if single_mode:
        max_price = options.single_card_max_price
    elif row.price is not None and row.price >= options.price_threshold:
        max_price = batch_price_cap(row.price)
    else:
        return None

    return SubstituteQuery(
        max_price=max_price,
        max_results=options.max_candidates,
        exclude_reserved=options.exclude_reserved,
    )


async def analyze_entry(
    entry: DecklistEntry,
    options: AnalysisOptions,
    *,
    single_mode: bool = False,
    client: httpx.AsyncClient | None = None,
    on_progress: ProgressCallback | None = None,
) -> DeckAnalysisRow:
    """
    Analyze one decklist entry.

    The lookup always completes before the substitute search starts,
    since the search needs the resolved card's identity, colors and price.
    """
    try:
        card = await lookup_by_name(entry.name, client=client)
    except CardLookupError as e:
        logger.warning("Lookup failed for %s: %s", entry.name, e)
        return DeckAnalysisRow(
            quantity=entry.quantity,
            name=entry.name,
            threshold=options.price_threshold,
            single_mode=single_mode,
            error=e.message,
        )

    row = _row_for_card(entry, card, options.price_threshold, single_mode)
    query = _query_for_row(row, options, single_mode)
    if query is None:
        return row

    try:
        row.candidates = await find_substitutes(card, query, client=client)
    except SubstituteSearchError as e:
        row.search_error = e.message
        _report(on_progress, f"Error: {e.message}")

    return row


async def analyze_deck(
    text: str,
    options: AnalysisOptions | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    on_progress: ProgressCallback | None = None,
) -> DeckAnalysis:
    """
    Analyze a full decklist.

    Entries are processed one at a time, in order.

    Args:
        text: Decklist text
        options: Analysis options
        client: Optional httpx client reused for every request
        on_progress: Receives human-readable status updates

    Returns:
        One row per entry, in decklist order
    """
    if options is None:
        options = AnalysisOptions()

    entries = parse_decklist(text)
    if not entries:
        _report(on_progress, "Paste a decklist first.")
        return DeckAnalysis()

    single_mode = len(entries) == 1
    rows: list[DeckAnalysisRow] = []

    async with open_client(client) as http:
        for i, entry in enumerate(entries, start=1):
            _report(on_progress, f"Fetching {i}/{len(entries)}: {entry.name}")
            row = await analyze_entry(
                entry, options, single_mode=single_mode, client=http, on_progress=on_progress
            )
            rows.append(row)

    analysis = DeckAnalysis(rows=rows, single_mode=single_mode)
    _report(on_progress, "Done (single-card mode)." if single_mode else "Done.")
    if analysis.failed_count:
        logger.warning("%d of %d entries failed lookup", analysis.failed_count, len(rows))

    return analysis


async def search_card(
    name: str,
    max_price: float = DEFAULT_MAX_PRICE,
    max_results: int = DEFAULT_MAX_RESULTS,
    *,
    client: httpx.AsyncClient | None = None,
) -> CardSearchResult:
    """
    Find substitutes for a single card by name.

    Args:
        name: Card to look up (fuzzy)
        max_price: Substitute price cap; invalid values fall back to the default
        max_results: Substitutes returned, at most MAX_SEARCH_RESULTS

    Raises:
        CardLookupError: If the name cannot be resolved
        SubstituteSearchError: If the candidate pool cannot be fetched
    """
    max_price = coerce_price(max_price)
    max_results = min(MAX_SEARCH_RESULTS, max_results)

    async with open_client(client) as http:
        card = await lookup_by_name(name, client=http)
        candidates: list[ScoredCandidate] = await find_substitutes(
            card,
            SubstituteQuery(max_price=max_price, max_results=max_results),
            client=http,
        )

    logger.info("Found %s. %d substitutes <= $%.2f", card.name, len(candidates), max_price)
    return CardSearchResult(
        card=card,
        price=lowest_price(card),
        max_price=max_price,
        candidates=candidates,
    )

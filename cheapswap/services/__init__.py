"""
CheapSwap services.

- catalog_client: Scryfall lookups and paginated searches
- substitute_finder: cheaper functional substitutes for one card
- deck_analyzer: batch and single-card analysis flows
- deck_import: Archidekt / Moxfield deck import
- csv_export: CSV rendering of analysis results
"""

from cheapswap.services.catalog_client import lookup_by_name, search_many
from cheapswap.services.csv_export import analysis_to_csv
from cheapswap.services.deck_analyzer import AnalysisOptions, analyze_deck, search_card
from cheapswap.services.deck_import import DeckSource, extract_deck_id, import_deck
from cheapswap.services.substitute_finder import (
    build_search_query,
    find_substitutes,
    identity_key,
    is_same_card_or_printing,
)

__all__ = [
    "AnalysisOptions",
    "DeckSource",
    "analysis_to_csv",
    "analyze_deck",
    "build_search_query",
    "extract_deck_id",
    "find_substitutes",
    "identity_key",
    "import_deck",
    "is_same_card_or_printing",
    "lookup_by_name",
    "search_card",
    "search_many",
]

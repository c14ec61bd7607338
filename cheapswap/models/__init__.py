from cheapswap.models.card import PRICE_FIELDS, Card, CardPrices, lowest_price
from cheapswap.models.decklist import DecklistEntry
from cheapswap.models.failure import (
    CardLookupError,
    CatalogSearchError,
    DeckImportError,
    FailureDetail,
    FailureKind,
    KnownError,
    SubstituteSearchError,
    UnrecognizedDeckUrlError,
)
from cheapswap.models.substitute import (
    CardSearchResult,
    DeckAnalysis,
    DeckAnalysisRow,
    ScoredCandidate,
    SubstituteQuery,
    coerce_price,
)

__all__ = [
    "Card",
    "CardLookupError",
    "CardPrices",
    "CardSearchResult",
    "CatalogSearchError",
    "DeckAnalysis",
    "DeckAnalysisRow",
    "DeckImportError",
    "DecklistEntry",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "PRICE_FIELDS",
    "ScoredCandidate",
    "SubstituteQuery",
    "SubstituteSearchError",
    "UnrecognizedDeckUrlError",
    "coerce_price",
    "lowest_price",
]

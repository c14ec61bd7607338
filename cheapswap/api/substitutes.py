"""
Substitute API endpoints.

Provides deck analysis, single-card search, deck import and CSV export.
Failures are KnownErrors and are rendered by the app's error handler.
"""

from typing import Annotated

from fastapi import APIRouter, Query, Response
from pydantic import BaseModel, Field

from cheapswap.config import DEFAULT_MAX_PRICE, DEFAULT_MAX_RESULTS, MAX_SEARCH_RESULTS
from cheapswap.models.card import Card
from cheapswap.models.substitute import DeckAnalysis, DeckAnalysisRow, ScoredCandidate
from cheapswap.services.csv_export import EXPORT_FILENAME, analysis_to_csv
from cheapswap.services.deck_analyzer import AnalysisOptions, analyze_deck, search_card
from cheapswap.services.deck_import import import_deck

router = APIRouter(prefix="/substitutes", tags=["substitutes"])


class CardResponse(BaseModel):
    """Display fields for a card."""

    name: str
    type_line: str
    mana_value: float | None = None
    color_identity: list[str] = Field(default_factory=list)
    image_url: str | None = None
    url: str | None = None


class CandidateResponse(BaseModel):
    """A ranked substitute."""

    card: CardResponse
    price: float
    score: float


class AnalysisRowResponse(BaseModel):
    """Analysis of one decklist entry."""

    quantity: int
    name: str
    type_line: str | None = None
    mana_value: float | None = None
    color_identity: list[str] = Field(default_factory=list)
    price: float | None = None
    threshold: float
    expensive: bool = False
    image_url: str | None = None
    url: str | None = None
    single_mode: bool = False
    candidates: list[CandidateResponse] = Field(default_factory=list)
    error: str | None = None
    search_error: str | None = None


class DeckAnalysisResponse(BaseModel):
    """Response model for a deck analysis."""

    single_mode: bool
    rows: list[AnalysisRowResponse]
    count: int


class AnalyzeRequest(BaseModel):
    """Request model for a deck analysis."""

    decklist: str = Field(..., description="Decklist text, one card per line")
    price_threshold: float = Field(default=0.0, ge=0)
    max_candidates: int = Field(default=8, ge=1, le=MAX_SEARCH_RESULTS)
    exclude_reserved: bool = True
    single_card_max_price: float = Field(
        default=DEFAULT_MAX_PRICE,
        description="Price cap when the decklist has exactly one card",
    )

    def to_options(self) -> AnalysisOptions:
        return AnalysisOptions(
            price_threshold=self.price_threshold,
            max_candidates=self.max_candidates,
            exclude_reserved=self.exclude_reserved,
            single_card_max_price=self.single_card_max_price,
        )


class CardSearchResponse(BaseModel):
    """Response model for a single-card substitute search."""

    card: CardResponse
    price: float | None = None
    max_price: float
    candidates: list[CandidateResponse]
    count: int


class ImportRequest(BaseModel):
    """Request model for a deck import."""

    url: str = Field(..., description="Archidekt or Moxfield deck URL, or a bare deck id")


class ImportResponse(BaseModel):
    """Imported decklist text, ready for analysis."""

    decklist: str


def _card_response(card: Card) -> CardResponse:
    return CardResponse(
        name=card.name,
        type_line=card.type_line,
        mana_value=card.mana_value,
        color_identity=list(card.color_identity),
        image_url=card.image_url,
        url=card.scryfall_uri,
    )


def _candidate_response(candidate: ScoredCandidate) -> CandidateResponse:
    return CandidateResponse(
        card=_card_response(candidate.card),
        price=candidate.price,
        score=candidate.score,
    )


def _row_response(row: DeckAnalysisRow) -> AnalysisRowResponse:
    return AnalysisRowResponse(
        quantity=row.quantity,
        name=row.name,
        type_line=row.type_line,
        mana_value=row.mana_value,
        color_identity=list(row.color_identity),
        price=row.price,
        threshold=row.threshold,
        expensive=row.is_expensive,
        image_url=row.image_url,
        url=row.url,
        single_mode=row.single_mode,
        candidates=[_candidate_response(c) for c in row.candidates],
        error=row.error,
        search_error=row.search_error,
    )


def _analysis_response(analysis: DeckAnalysis) -> DeckAnalysisResponse:
    rows = [_row_response(row) for row in analysis.rows]
    return DeckAnalysisResponse(single_mode=analysis.single_mode, rows=rows, count=len(rows))


@router.post("/analyze", response_model=DeckAnalysisResponse)
async def analyze(request: AnalyzeRequest) -> DeckAnalysisResponse:
    """
    Analyze a decklist.

    Cards at or above the price threshold get cheaper substitutes.
    Entries that fail lookup are reported per row, not as a request error.
    """
    analysis = await analyze_deck(request.decklist, request.to_options())
    return _analysis_response(analysis)


@router.get("/cards/{name}", response_model=CardSearchResponse)
async def card_substitutes(
    name: str,
    max_price: Annotated[float, Query()] = DEFAULT_MAX_PRICE,
    max_results: Annotated[int, Query(ge=1, le=MAX_SEARCH_RESULTS)] = DEFAULT_MAX_RESULTS,
) -> CardSearchResponse:
    """
    Find cheaper functional substitutes for one card.

    Returns 404 if the card cannot be found, 502 if Scryfall search fails.
    """
    result = await search_card(name, max_price=max_price, max_results=max_results)
    candidates = [_candidate_response(c) for c in result.candidates]

    return CardSearchResponse(
        card=_card_response(result.card),
        price=result.price,
        max_price=result.max_price,
        candidates=candidates,
        count=len(candidates),
    )


@router.post("/import", response_model=ImportResponse)
async def import_decklist(request: ImportRequest) -> ImportResponse:
    """
    Import a public Archidekt or Moxfield deck as decklist text.

    Returns 400 for an unrecognized URL/id, 502 if the import request fails.
    """
    decklist = await import_deck(request.url)
    return ImportResponse(decklist=decklist)


@router.post("/export")
async def export_csv(request: AnalyzeRequest) -> Response:
    """Analyze a decklist and return the results as a CSV download."""
    analysis = await analyze_deck(request.decklist, request.to_options())

    return Response(
        content=analysis_to_csv(analysis.rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )

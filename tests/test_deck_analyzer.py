"""Tests for deck analysis flows."""

from collections.abc import Awaitable, Callable
from typing import Any
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx

from cheapswap.models.card import Card
from cheapswap.models.failure import CardLookupError, SubstituteSearchError
from cheapswap.models.substitute import ScoredCandidate, SubstituteQuery
from cheapswap.services.deck_analyzer import (
    AnalysisOptions,
    analyze_deck,
    batch_price_cap,
    search_card,
)

NAMED_URL = "https://api.scryfall.com/cards/named"
SEARCH_URL = "https://api.scryfall.com/cards/search"

LOOKUP = "cheapswap.services.deck_analyzer.lookup_by_name"
FIND = "cheapswap.services.deck_analyzer.find_substitutes"


@pytest.fixture
def cards(make_card: Callable[..., Card]) -> dict[str, Card]:
    return {
        "Rhystic Study": make_card(
            "Rhystic Study", type_line="Enchantment", prices={"usd": "38.50"}
        ),
        "Sol Ring": make_card("Sol Ring", color_identity=[], prices={"usd": "1.50"}),
        "Cheap Thing": make_card("Cheap Thing", prices={"usd": "0.10"}),
        "Unpriced Thing": make_card("Unpriced Thing", prices={"usd": None}),
    }


@pytest.fixture
def lookup(cards: dict[str, Card]) -> Callable[..., Awaitable[Card]]:
    """Fake catalog lookup that fails for unknown names."""

    async def fake_lookup(name: str, client: Any = None) -> Card:
        if name not in cards:
            raise CardLookupError(name, detail="HTTP 404")
        return cards[name]

    return fake_lookup


def _query_of(find_mock: AsyncMock, call: int = -1) -> SubstituteQuery:
    query: SubstituteQuery = find_mock.await_args_list[call].args[1]
    return query


class TestBatchPriceCap:
    def test_one_cent_under(self) -> None:
        assert batch_price_cap(38.5) == pytest.approx(38.49)

    def test_floor(self) -> None:
        assert batch_price_cap(0.10) == 0.25
        assert batch_price_cap(0.26) == pytest.approx(0.25)


class TestAnalyzeDeck:
    """Tests for batch analysis."""

    async def test_only_expensive_cards_searched(
        self, lookup: Callable[..., Awaitable[Card]]
    ) -> None:
        options = AnalysisOptions(price_threshold=5.0)

        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(FIND, new_callable=AsyncMock, return_value=[]) as find_mock,
        ):
            analysis = await analyze_deck("1 Rhystic Study\n1 Sol Ring", options)

        assert find_mock.await_count == 1
        assert find_mock.await_args_list[0].args[0].name == "Rhystic Study"
        assert _query_of(find_mock).max_price == pytest.approx(38.49)
        assert [row.is_expensive for row in analysis.rows] == [True, False]
        assert analysis.single_mode is False

    async def test_cheap_card_uses_floor_cap(self, lookup: Callable[..., Awaitable[Card]]) -> None:
        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(FIND, new_callable=AsyncMock, return_value=[]) as find_mock,
        ):
            await analyze_deck("1 Cheap Thing\n1 Sol Ring")

        assert _query_of(find_mock, 0).max_price == 0.25
        assert _query_of(find_mock, 1).max_price == pytest.approx(1.49)

    async def test_unpriced_card_not_searched(
        self, lookup: Callable[..., Awaitable[Card]]
    ) -> None:
        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(FIND, new_callable=AsyncMock, return_value=[]) as find_mock,
        ):
            analysis = await analyze_deck("1 Unpriced Thing\n1 Sol Ring")

        assert find_mock.await_count == 1
        assert analysis.rows[0].price is None

    async def test_options_passed_to_query(self, lookup: Callable[..., Awaitable[Card]]) -> None:
        options = AnalysisOptions(max_candidates=3, exclude_reserved=False)

        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(FIND, new_callable=AsyncMock, return_value=[]) as find_mock,
        ):
            await analyze_deck("1 Rhystic Study\n1 Sol Ring", options)

        query = _query_of(find_mock, 0)
        assert query.max_results == 3
        assert query.exclude_reserved is False

    async def test_lookup_failure_does_not_abort(
        self, lookup: Callable[..., Awaitable[Card]]
    ) -> None:
        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(FIND, new_callable=AsyncMock, return_value=[]),
        ):
            analysis = await analyze_deck("2 Notacard\n1 Sol Ring")

        failed, ok = analysis.rows
        assert failed.quantity == 2
        assert failed.name == "Notacard"
        assert failed.error is not None
        assert "Notacard" in failed.error
        assert failed.candidates == []
        assert ok.error is None
        assert ok.price == 1.5
        assert analysis.failed_count == 1

    async def test_search_failure_keeps_card(
        self, lookup: Callable[..., Awaitable[Card]]
    ) -> None:
        progress: list[str] = []

        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(
                FIND,
                new_callable=AsyncMock,
                side_effect=SubstituteSearchError("Rhystic Study", detail="HTTP 503"),
            ),
        ):
            analysis = await analyze_deck(
                "1 Rhystic Study\n1 Sol Ring", on_progress=progress.append
            )

        row = analysis.rows[0]
        assert row.error is None
        assert row.price == 38.5
        assert row.candidates == []
        assert row.search_error is not None
        assert any(message.startswith("Error: ") for message in progress)
        assert len(analysis.rows) == 2

    async def test_candidates_attached_in_order(
        self, lookup: Callable[..., Awaitable[Card]], make_card: Callable[..., Card]
    ) -> None:
        candidates = [
            ScoredCandidate(card=make_card("Mystic Remora"), price=6.0, score=116.0),
            ScoredCandidate(card=make_card("Esper Sentinel"), price=4.0, score=106.0),
        ]

        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(FIND, new_callable=AsyncMock, return_value=candidates),
        ):
            analysis = await analyze_deck("1 Rhystic Study\n1 Sol Ring")

        assert [c.card.name for c in analysis.rows[0].candidates] == [
            "Mystic Remora",
            "Esper Sentinel",
        ]
        assert analysis.candidate_count == 4

    async def test_progress_messages(self, lookup: Callable[..., Awaitable[Card]]) -> None:
        progress: list[str] = []

        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(FIND, new_callable=AsyncMock, return_value=[]),
        ):
            await analyze_deck("1 Rhystic Study\n1 Sol Ring", on_progress=progress.append)

        assert progress == [
            "Fetching 1/2: Rhystic Study",
            "Fetching 2/2: Sol Ring",
            "Done.",
        ]

    async def test_empty_decklist(self) -> None:
        progress: list[str] = []

        with patch(LOOKUP, new_callable=AsyncMock) as lookup_mock:
            analysis = await analyze_deck("# just a comment\n", on_progress=progress.append)

        assert analysis.rows == []
        assert progress == ["Paste a decklist first."]
        lookup_mock.assert_not_awaited()


class TestMalformedCatalogResponses:
    """Bad catalog records fail only the entry they belong to."""

    @respx.mock
    async def test_bad_lookup_record_fails_one_row(
        self, rhystic_study_json: dict[str, Any]
    ) -> None:
        respx.get(NAMED_URL).mock(
            side_effect=[
                httpx.Response(200, json={"object": "error"}),
                httpx.Response(200, json=rhystic_study_json),
            ]
        )
        respx.get(SEARCH_URL).mock(
            return_value=httpx.Response(404, json={"object": "error", "code": "not_found"})
        )

        analysis = await analyze_deck("1 Broken\n1 Rhystic Study")

        broken, ok = analysis.rows
        assert broken.name == "Broken"
        assert broken.error is not None
        assert "Broken" in broken.error
        assert ok.error is None
        assert ok.price == 38.5
        assert analysis.failed_count == 1

    @respx.mock
    async def test_bad_search_page_sets_search_error(
        self, rhystic_study_json: dict[str, Any]
    ) -> None:
        respx.get(NAMED_URL).mock(return_value=httpx.Response(200, json=rhystic_study_json))
        respx.get(SEARCH_URL).mock(
            side_effect=[
                httpx.Response(200, json={"object": "list", "data": [{"name": "No Id"}]}),
                httpx.Response(404, json={"object": "error", "code": "not_found"}),
            ]
        )

        analysis = await analyze_deck("1 Rhystic Study\n1 Rhystic Study")

        first, second = analysis.rows
        assert first.search_error is not None
        assert first.candidates == []
        assert second.search_error is None
        assert second.candidates == []


class TestSingleCardMode:
    """A decklist with exactly one entry."""

    async def test_uses_independent_cap(self, lookup: Callable[..., Awaitable[Card]]) -> None:
        options = AnalysisOptions(price_threshold=100.0, single_card_max_price=3.0)
        progress: list[str] = []

        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(FIND, new_callable=AsyncMock, return_value=[]) as find_mock,
        ):
            analysis = await analyze_deck("1 Sol Ring", options, on_progress=progress.append)

        assert analysis.single_mode is True
        assert analysis.rows[0].single_mode is True
        assert _query_of(find_mock).max_price == 3.0
        assert progress[-1] == "Done (single-card mode)."

    async def test_cap_may_exceed_card_price(
        self, lookup: Callable[..., Awaitable[Card]]
    ) -> None:
        options = AnalysisOptions(single_card_max_price=10.0)

        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(FIND, new_callable=AsyncMock, return_value=[]) as find_mock,
        ):
            await analyze_deck("1 Sol Ring", options)

        assert _query_of(find_mock).max_price == 10.0


class TestSearchCard:
    """Tests for single-card search."""

    async def test_returns_card_and_candidates(
        self, lookup: Callable[..., Awaitable[Card]], make_card: Callable[..., Card]
    ) -> None:
        candidate = ScoredCandidate(card=make_card("Mystic Remora"), price=6.0, score=116.0)

        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(FIND, new_callable=AsyncMock, return_value=[candidate]),
        ):
            result = await search_card("Rhystic Study", max_price=10)

        assert result.card.name == "Rhystic Study"
        assert result.price == 38.5
        assert result.max_price == 10.0
        assert result.candidates == [candidate]

    async def test_caps_results_and_coerces_price(
        self, lookup: Callable[..., Awaitable[Card]]
    ) -> None:
        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(FIND, new_callable=AsyncMock, return_value=[]) as find_mock,
        ):
            result = await search_card(
                "Sol Ring",
                max_price="lots",  # type: ignore[arg-type]
                max_results=100,
            )

        query = _query_of(find_mock)
        assert query.max_results == 24
        assert query.max_price == 10.0
        assert result.max_price == 10.0

    async def test_lookup_failure_propagates(
        self, lookup: Callable[..., Awaitable[Card]]
    ) -> None:
        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(FIND, new_callable=AsyncMock) as find_mock,
            pytest.raises(CardLookupError),
        ):
            await search_card("Notacard")

        find_mock.assert_not_awaited()

    async def test_search_failure_propagates(
        self, lookup: Callable[..., Awaitable[Card]]
    ) -> None:
        with (
            patch(LOOKUP, new_callable=AsyncMock, side_effect=lookup),
            patch(FIND, new_callable=AsyncMock, side_effect=SubstituteSearchError("Sol Ring")),
            pytest.raises(SubstituteSearchError),
        ):
            await search_card("Sol Ring")

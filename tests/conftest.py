from collections.abc import Callable
from typing import Any

import pytest

from cheapswap.config import settings
from cheapswap.models.card import Card
from cheapswap.parsers.scryfall import parse_card

CardJsonFactory = Callable[..., dict[str, Any]]


@pytest.fixture(autouse=True)
def no_page_delay(monkeypatch: pytest.MonkeyPatch) -> None:
    """Skip the rate-limit pause between search pages."""
    monkeypatch.setattr(settings, "scryfall_page_delay", 0.0)


@pytest.fixture
def make_card_json() -> CardJsonFactory:
    """Factory for Scryfall-like card objects."""
    counter = iter(range(1, 10_000))

    def factory(name: str, **overrides: Any) -> dict[str, Any]:
        n = next(counter)
        slug = name.lower().replace(" ", "-")
        data: dict[str, Any] = {
            "object": "card",
            "id": f"card-{n}",
            "oracle_id": f"oracle-{slug}",
            "name": name,
            "type_line": "Instant",
            "color_identity": ["U"],
            "cmc": 2.0,
            "oracle_text": "",
            "prices": {"usd": "1.00", "usd_foil": None, "usd_etched": None},
            "image_uris": {"normal": f"https://cards.scryfall.io/normal/{slug}.jpg"},
            "scryfall_uri": f"https://scryfall.com/card/{slug}",
            "prints_search_uri": f"https://api.scryfall.com/cards/search?q=oracleid%3A{slug}",
        }
        data.update(overrides)
        return data

    return factory


@pytest.fixture
def make_card(make_card_json: CardJsonFactory) -> Callable[..., Card]:
    """Factory for parsed Card snapshots."""

    def factory(name: str, **overrides: Any) -> Card:
        return parse_card(make_card_json(name, **overrides))

    return factory


@pytest.fixture
def rhystic_study_json(make_card_json: CardJsonFactory) -> dict[str, Any]:
    return make_card_json(
        "Rhystic Study",
        id="rhystic-1",
        oracle_id="oracle-rhystic",
        type_line="Enchantment",
        cmc=3.0,
        oracle_text=(
            "Whenever an opponent casts a spell, you may draw a card "
            "unless that player pays {1}."
        ),
        prices={"usd": "38.50", "usd_foil": "60.00", "usd_etched": None},
    )


@pytest.fixture
def sample_decklist() -> str:
    """Sample decklist mixing formats and comments."""
    return """# Commander staples
3x Sol Ring
1 Arcane Signet (C21) 263
// utility
Swords to Plowshares
1 Smothering Tithe *F*"""

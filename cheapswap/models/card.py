import math
from dataclasses import dataclass, field

# Finish variants, in the order prices are considered
PRICE_FIELDS: tuple[str, ...] = ("usd", "usd_foil", "usd_etched")


@dataclass(frozen=True, slots=True)
class CardPrices:
    """
    Catalog prices for one printing, keyed by finish.

    Any field may be None when the catalog has no price for that finish.
    """

    usd: float | None = None
    usd_foil: float | None = None
    usd_etched: float | None = None


@dataclass(frozen=True, slots=True)
class Card:
    """
    Read-only snapshot of a Scryfall card record.

    Attributes:
        id: Scryfall id of this printing
        name: Display name (e.g., "Rhystic Study")
        type_line: Full type line (e.g., "Creature — Elf Druid")
        oracle_id: Identity shared by every printing of the same card
        prints_search_uri: Groups alternate printings when oracle_id is absent
        color_identity: Color symbols (W, U, B, R, G); empty means colorless
        mana_value: Converted mana cost, None if the catalog omits it
        oracle_text: Rules text, None for cards without any
        prices: Prices by finish
        image_url: Normal-size image, possibly taken from the front face
        scryfall_uri: Canonical web page for the card
    """

    id: str
    name: str
    type_line: str = ""
    oracle_id: str | None = None
    prints_search_uri: str | None = None
    color_identity: tuple[str, ...] = ()
    mana_value: float | None = None
    oracle_text: str | None = None
    prices: CardPrices = field(default_factory=CardPrices)
    image_url: str | None = None
    scryfall_uri: str | None = None


def lowest_price(card: Card) -> float | None:
    """
    Cheapest available price across finish variants.

    Only present, finite, positive values count.

    Returns:
        The minimum price, or None if the card has no usable price.
    """
    candidates = []
    for name in PRICE_FIELDS:
        value = getattr(card.prices, name)
        if value is not None and math.isfinite(value) and value > 0:
            candidates.append(value)

    return min(candidates) if candidates else None

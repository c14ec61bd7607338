"""
Scryfall card payload parser.

Turns card objects from the Scryfall REST API into Card snapshots.

Card objects: https://scryfall.com/docs/api/cards
"""

import math
from typing import Any

from cheapswap.models.card import PRICE_FIELDS, Card, CardPrices


def _parse_price(value: Any) -> float | None:
    """Scryfall sends prices as decimal strings ("1.23") or null."""
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if math.isfinite(price) else None


def _parse_mana_value(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def extract_image_url(data: dict[str, Any]) -> str | None:
    """
    Normal-size image for a card.

    Multi-faced cards carry images per face; the front face is used.
    """
    image_uris = data.get("image_uris") or {}
    if image_uris.get("normal"):
        return str(image_uris["normal"])

    faces = data.get("card_faces") or []
    if faces:
        face_images = faces[0].get("image_uris") or {}
        if face_images.get("normal"):
            return str(face_images["normal"])

    return None


def extract_oracle_text(data: dict[str, Any]) -> str | None:
    """
    Rules text for a card.

    Multi-faced cards have no top-level oracle_text; their faces' texts
    are joined instead.
    """
    text = data.get("oracle_text")
    if text:
        return str(text)

    face_texts = [
        str(face["oracle_text"]) for face in data.get("card_faces") or [] if face.get("oracle_text")
    ]
    return "\n".join(face_texts) if face_texts else None


def parse_card(data: dict[str, Any]) -> Card:
    """
    Build a Card from a Scryfall card object.

    Args:
        data: Decoded JSON card object

    Returns:
        Immutable Card snapshot

    Raises:
        KeyError: If the payload has no id or name
    """
    prices = data.get("prices") or {}

    return Card(
        id=str(data["id"]),
        name=str(data["name"]),
        type_line=str(data.get("type_line") or ""),
        oracle_id=data.get("oracle_id") or None,
        prints_search_uri=data.get("prints_search_uri") or None,
        color_identity=tuple(data.get("color_identity") or ()),
        mana_value=_parse_mana_value(data.get("cmc")),
        oracle_text=extract_oracle_text(data),
        prices=CardPrices(**{name: _parse_price(prices.get(name)) for name in PRICE_FIELDS}),
        image_url=extract_image_url(data),
        scryfall_uri=data.get("scryfall_uri") or None,
    )


def parse_cards(items: list[dict[str, Any]]) -> list[Card]:
    """Parse a page of Scryfall card objects."""
    return [parse_card(item) for item in items]

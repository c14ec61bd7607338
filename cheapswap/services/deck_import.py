"""
Deck import from Archidekt and Moxfield.

Fetches a public deck by URL or bare id and renders it as decklist text
("qty Card Name" per line) for parse_decklist.

Note: Both sites' JSON shapes are undocumented and may change. Moxfield
in particular may block requests it considers automated.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Literal

import httpx

from cheapswap.config import settings
from cheapswap.models.failure import DeckImportError, UnrecognizedDeckUrlError
from cheapswap.parsers.decklist import format_decklist
from cheapswap.services.catalog_client import open_client

logger = logging.getLogger(__name__)

DeckSite = Literal["archidekt", "moxfield"]

_MOXFIELD_URL = re.compile(r"moxfield\.com/decks/([A-Za-z0-9_-]+)", re.IGNORECASE)
_ARCHIDEKT_URL = re.compile(r"archidekt\.com/decks/(\d+)", re.IGNORECASE)
_BARE_ARCHIDEKT_ID = re.compile(r"^\d+$")
_BARE_MOXFIELD_ID = re.compile(r"^[A-Za-z0-9_-]{10,}$")


@dataclass(frozen=True, slots=True)
class DeckSource:
    """A deck on a supported site."""

    site: DeckSite
    deck_id: str


def extract_deck_id(url: str) -> DeckSource | None:
    """
    Detect the site and deck id from a URL or bare id.

    Bare numbers are Archidekt ids; long bare tokens are Moxfield ids.

    Returns:
        DeckSource, or None if nothing matches
    """
    url = (url or "").strip()

    match = _MOXFIELD_URL.search(url)
    if match:
        return DeckSource(site="moxfield", deck_id=match.group(1))

    match = _ARCHIDEKT_URL.search(url)
    if match:
        return DeckSource(site="archidekt", deck_id=match.group(1))

    if _BARE_ARCHIDEKT_ID.match(url):
        return DeckSource(site="archidekt", deck_id=url)
    if _BARE_MOXFIELD_ID.match(url):
        return DeckSource(site="moxfield", deck_id=url)

    return None


def _quantity(value: Any) -> int:
    try:
        quantity = int(value)
    except (TypeError, ValueError):
        return 1
    return quantity if quantity > 0 else 1


def parse_archidekt_deck(data: dict[str, Any]) -> list[tuple[int, str]]:
    """Extract (quantity, name) pairs from an Archidekt deck payload."""
    cards = data.get("cards")
    if not isinstance(cards, list):
        return []

    entries: list[tuple[int, str]] = []
    for item in cards:
        if not isinstance(item, dict):
            continue
        name = (item.get("card") or {}).get("name") or item.get("name")
        if not name:
            continue
        quantity = item.get("quantity") or item.get("count")
        entries.append((_quantity(quantity), str(name)))

    return entries


def parse_moxfield_deck(data: dict[str, Any]) -> list[tuple[int, str]]:
    """Extract (quantity, name) pairs from a Moxfield deck's mainboard."""
    mainboard = data.get("mainboard")
    if not isinstance(mainboard, dict):
        return []

    entries: list[tuple[int, str]] = []
    for item in mainboard.values():
        if not isinstance(item, dict):
            continue
        name = (item.get("card") or {}).get("name") or item.get("name")
        if not name:
            continue
        entries.append((_quantity(item.get("quantity")), str(name)))

    return entries


_SITE_LABELS: dict[DeckSite, str] = {"archidekt": "Archidekt", "moxfield": "Moxfield"}

_FETCH_FAILURE_HINTS: dict[DeckSite, str] = {
    "archidekt": "deck might be private or blocked",
    "moxfield": "may be blocked by Cloudflare or the deck is private",
}


def _deck_api_url(source: DeckSource) -> str:
    if source.site == "archidekt":
        return f"{settings.archidekt_api_url}/decks/{source.deck_id}/"
    return f"{settings.moxfield_api_url}/decks/all/{source.deck_id}"


async def fetch_deck_json(source: DeckSource, client: httpx.AsyncClient | None = None) -> Any:
    """
    Fetch the raw deck payload for a source.

    Raises:
        DeckImportError: If the request fails or the body is not JSON
    """
    label = _SITE_LABELS[source.site]
    message = f"{label} import failed ({_FETCH_FAILURE_HINTS[source.site]})."

    try:
        async with open_client(client) as http:
            response = await http.get(_deck_api_url(source))
            response.raise_for_status()
            return response.json()
    except httpx.HTTPStatusError as e:
        raise DeckImportError(
            source.site, message, detail=f"HTTP {e.response.status_code}"
        ) from e
    except httpx.RequestError as e:
        raise DeckImportError(source.site, message, detail=str(e)) from e
    except ValueError as e:
        raise DeckImportError(source.site, message, detail="Invalid JSON in response") from e


async def import_deck(url: str, client: httpx.AsyncClient | None = None) -> str:
    """
    Import a deck as decklist text.

    Args:
        url: Archidekt/Moxfield deck URL or bare deck id
        client: Optional httpx client for connection reuse

    Returns:
        Decklist text, one "qty Card Name" per line

    Raises:
        UnrecognizedDeckUrlError: If the URL/id matches no supported site
        DeckImportError: If the request fails or the deck has no cards
    """
    source = extract_deck_id(url)
    if source is None:
        raise UnrecognizedDeckUrlError(url)

    logger.info("Importing %s deck %s", source.site, source.deck_id)
    data = await fetch_deck_json(source, client=client)

    payload = data if isinstance(data, dict) else {}
    if source.site == "archidekt":
        entries = parse_archidekt_deck(payload)
    else:
        entries = parse_moxfield_deck(payload)

    if not entries:
        label = _SITE_LABELS[source.site]
        raise DeckImportError(
            source.site, f"{label} deck loaded but card list was empty/unexpected."
        )

    logger.info("Imported %d entries from %s", len(entries), source.site)
    return format_decklist(entries)

"""
Scryfall catalog client.

Two operations, both async and both hard failures on any unsuccessful
HTTP exchange:
- lookup_by_name: fuzzy single-card resolution
- search_many: paginated search, capped at a pool size

No retries, no backoff. Callers that want resilience wrap these.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from cheapswap.config import settings
from cheapswap.models.card import Card
from cheapswap.models.failure import CardLookupError, CatalogSearchError
from cheapswap.parsers.scryfall import parse_card, parse_cards

logger = logging.getLogger(__name__)


def default_headers() -> dict[str, str]:
    """Headers Scryfall requires on every request."""
    return {"User-Agent": settings.user_agent, "Accept": "application/json"}


@asynccontextmanager
async def open_client(client: httpx.AsyncClient | None = None) -> AsyncIterator[httpx.AsyncClient]:
    """
    Yield the caller's client, or a short-lived one closed on exit.

    Args:
        client: Optional httpx client for connection reuse
    """
    if client is not None:
        yield client
        return

    async with httpx.AsyncClient(
        timeout=settings.http_timeout,
        headers=default_headers(),
        follow_redirects=True,
    ) as owned:
        yield owned


async def lookup_by_name(name: str, client: httpx.AsyncClient | None = None) -> Card:
    """
    Resolve a card name with Scryfall's fuzzy matcher.

    Args:
        name: Card name, possibly misspelled or partial
        client: Optional httpx client for connection reuse

    Returns:
        The matched Card

    Raises:
        CardLookupError: If the request fails, Scryfall finds no match, or the
            response is not a card object
    """
    url = f"{settings.scryfall_api_url}/cards/named"
    logger.debug("Looking up %r", name)

    try:
        async with open_client(client) as http:
            response = await http.get(url, params={"fuzzy": name})
            response.raise_for_status()
            return parse_card(response.json())
    except httpx.HTTPStatusError as e:
        raise CardLookupError(name, detail=f"HTTP {e.response.status_code}") from e
    except httpx.RequestError as e:
        raise CardLookupError(name, detail=str(e)) from e
    except ValueError as e:
        raise CardLookupError(name, detail="Invalid JSON in response") from e
    except (KeyError, TypeError, AttributeError) as e:
        raise CardLookupError(name, detail="Unexpected response shape") from e


def _is_no_match(response: httpx.Response) -> bool:
    """
    True if a search response means "zero cards matched".

    Scryfall answers an empty search with 404 and error code "not_found".
    """
    if response.status_code != 404:
        return False
    try:
        return bool(response.json().get("code") == "not_found")
    except ValueError:
        return False


async def search_many(
    query: str,
    pool_cap: int | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[Card]:
    """
    Run a Scryfall search, following pagination until the pool is full.

    Pages are fetched strictly in sequence; each next_page link is only
    known once the previous page has arrived.

    Args:
        query: Scryfall search expression
        pool_cap: Maximum cards to return (defaults to settings)
        client: Optional httpx client for connection reuse

    Returns:
        At most pool_cap cards, in catalog order (cheapest first).
        Empty if nothing matched.

    Raises:
        CatalogSearchError: If any page request fails. Cards from earlier
            pages are discarded.
    """
    if pool_cap is None:
        pool_cap = settings.candidate_pool_size

    url: str | None = f"{settings.scryfall_api_url}/cards/search"
    params: dict[str, str] | None = {"q": query, "unique": "cards", "order": "usd", "dir": "asc"}
    pool: list[Card] = []
    page = 0

    try:
        async with open_client(client) as http:
            while url and len(pool) < pool_cap:
                page += 1
                response = await http.get(url, params=params)

                if page == 1 and _is_no_match(response):
                    logger.debug("No cards match %r", query)
                    return []

                response.raise_for_status()
                data = response.json()
                pool.extend(parse_cards(data.get("data", [])))
                logger.debug("Search page %d: %d cards pooled", page, len(pool))

                if data.get("has_more") and data.get("next_page"):
                    url = str(data["next_page"])
                    params = None  # Next page URL includes params
                    if len(pool) < pool_cap:
                        await asyncio.sleep(settings.scryfall_page_delay)
                else:
                    url = None
    except httpx.HTTPStatusError as e:
        raise CatalogSearchError(query, status_code=e.response.status_code) from e
    except httpx.RequestError as e:
        raise CatalogSearchError(query, detail=str(e)) from e
    except ValueError as e:
        raise CatalogSearchError(query, detail="Invalid JSON in response") from e
    except (KeyError, TypeError, AttributeError) as e:
        raise CatalogSearchError(query, detail="Unexpected response shape") from e

    return pool[:pool_cap]

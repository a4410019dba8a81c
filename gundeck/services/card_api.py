"""
Card backend client.

Fetches card records from the card backend's REST API. Every response
uses the envelope ``{"success": bool, "data": [...], "pagination": {...}}``.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from gundeck.config import (
    CARD_FETCH_RETRIES,
    CARD_PAGE_SIZE,
    CARD_RETRY_DELAY_SECONDS,
    settings,
)
from gundeck.models.card import Card
from gundeck.parsers.card_data import parse_card

logger = logging.getLogger(__name__)

USER_AGENT = "GunDeck/1.0"


class CardFetchError(Exception):
    """
    Raised when the card backend cannot be reached or rejects a request.

    status_code is the HTTP status when the backend answered with an error.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        """True for rate limiting and server errors."""
        return self.status_code is not None and (
            self.status_code == 429 or self.status_code >= 500
        )


@dataclass
class CardPage:
    """
    One page of card records.

    record_count is the number of raw records served, including any skipped
    for having no name. total is None when the backend omits pagination.
    """

    cards: list[Card]
    page: int
    total: int | None
    record_count: int = 0


def _unwrap(response: httpx.Response) -> dict[str, Any]:
    """Check status and envelope, returning the decoded body."""
    response.raise_for_status()
    body: dict[str, Any] = response.json()
    if not body.get("success"):
        raise CardFetchError(body.get("message") or "API request failed")
    return body


def _parse_records(body: dict[str, Any]) -> list[Card]:
    data = body.get("data")
    if not isinstance(data, list):
        return []
    return [parse_card(record) for record in data if record.get("name")]


async def fetch_card_page(
    client: httpx.AsyncClient,
    page: int = 1,
    limit: int = CARD_PAGE_SIZE,
) -> CardPage:
    """
    Fetch a single page of cards.

    Args:
        client: HTTP client pointed at the card backend
        page: 1-based page number
        limit: Page size

    Returns:
        CardPage with parsed cards and the backend's reported total

    Raises:
        CardFetchError: If the request fails or the backend reports failure
    """
    try:
        response = await client.get("/api/cards", params={"page": page, "limit": limit})
        body = _unwrap(response)
    except httpx.HTTPStatusError as e:
        raise CardFetchError(
            f"Failed to fetch cards page {page}: HTTP {e.response.status_code}",
            status_code=e.response.status_code,
        ) from e
    except httpx.RequestError as e:
        raise CardFetchError(f"Failed to fetch cards page {page}: {e}") from e

    cards = _parse_records(body)
    pagination = body.get("pagination") or {}
    total = pagination.get("total")
    data = body.get("data")
    return CardPage(
        cards=cards,
        page=page,
        total=int(total) if total is not None else None,
        record_count=len(data) if isinstance(data, list) else 0,
    )


def _client(base_url: str | None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url or settings.card_api_url,
        headers={"User-Agent": USER_AGENT},
        timeout=30.0,
    )


async def _fetch_page_with_retry(
    client: httpx.AsyncClient,
    page: int,
    limit: int,
    retries: int,
    retry_delay: float,
) -> CardPage:
    """Fetch a page, retrying rate-limited and server-error responses with backoff."""
    attempt = 0
    while True:
        try:
            return await fetch_card_page(client, page=page, limit=limit)
        except CardFetchError as e:
            if not e.retryable or attempt >= retries:
                raise
            wait = retry_delay * 2**attempt
            attempt += 1
            logger.warning(
                "Page %d failed with HTTP %s, retry %d/%d in %.1fs",
                page,
                e.status_code,
                attempt,
                retries,
                wait,
            )
            await asyncio.sleep(wait)


async def fetch_all_cards(
    base_url: str | None = None,
    limit: int = CARD_PAGE_SIZE,
    retries: int = CARD_FETCH_RETRIES,
    retry_delay: float = CARD_RETRY_DELAY_SECONDS,
) -> list[Card]:
    """
    Fetch every card, page by page.

    Stops on a short or empty page, or once the reported total has been
    reached. Without a reported total only the page length decides. A page
    answered with 429 or a 5xx is retried up to `retries` times, waiting
    `retry_delay` seconds and doubling the wait on each attempt.

    Raises:
        CardFetchError: If a page fails for good
    """
    cards: list[Card] = []
    page = 1

    async with _client(base_url) as client:
        while True:
            result = await _fetch_page_with_retry(client, page, limit, retries, retry_delay)
            cards.extend(result.cards)
            logger.info(
                "Fetched page %d (%d cards, %d/%s)",
                page,
                len(result.cards),
                len(cards),
                "?" if result.total is None else result.total,
            )

            if result.record_count < limit:
                break
            if result.total is not None and len(cards) >= result.total:
                break
            page += 1

    return cards


async def search_cards_by_name(name: str, base_url: str | None = None) -> list[Card]:
    """
    Search the card backend by name.

    Raises:
        CardFetchError: If the request fails or the backend reports failure
    """
    async with _client(base_url) as client:
        try:
            response = await client.get("/api/cards", params={"name": name})
            body = _unwrap(response)
        except httpx.HTTPStatusError as e:
            raise CardFetchError(
                f"Failed to search cards for {name!r}: HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise CardFetchError(f"Failed to search cards for {name!r}: {e}") from e

    return _parse_records(body)

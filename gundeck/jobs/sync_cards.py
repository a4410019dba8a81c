"""
Sync the card catalog from the card backend.

Run this job to refresh the local card file the API serves from.
"""

import asyncio
import json
import logging
from collections import Counter
from pathlib import Path

from gundeck.config import settings
from gundeck.parsers.card_data import card_to_dict
from gundeck.services.card_api import CardFetchError, fetch_all_cards
from gundeck.services.catalog import get_catalog

logger = logging.getLogger(__name__)


async def run_sync(path: Path | None = None, base_url: str | None = None) -> int:
    """
    Fetch every card and write the catalog file.

    The file is only replaced once all pages have been fetched.

    Returns:
        Number of cards written
    """
    if path is None:
        path = settings.card_data_path

    logger.info("Syncing cards from %s...", base_url or settings.card_api_url)

    try:
        cards = await fetch_all_cards(base_url=base_url)
    except CardFetchError as e:
        logger.error("Failed to sync cards: %s", e)
        raise

    kinds = Counter(card.kind.value for card in cards)
    logger.info("Fetched %d cards (%s)", len(cards), dict(kinds))

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([card_to_dict(card) for card in cards], f, indent=2)

    get_catalog.cache_clear()
    logger.info("Wrote card catalog to %s", path)
    return len(cards)


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_sync())


if __name__ == "__main__":
    main()

"""
GunDeck services.

Card catalog, card backend client and the deck builder store.
"""

from gundeck.services.card_api import (
    CardFetchError,
    CardPage,
    fetch_all_cards,
    fetch_card_page,
    search_cards_by_name,
)
from gundeck.services.catalog import (
    CardCatalog,
    CardFilters,
    TcgFilters,
    get_catalog,
    load_catalog,
    matches_filters,
    matches_tcg_filters,
)
from gundeck.services.deck_store import (
    BuilderSnapshot,
    DeckFilters,
    DeckNotFoundError,
    DeckPersistence,
    DeckStore,
    DeckStoreError,
    InMemoryDeckPersistence,
    JsonFileDeckPersistence,
    VersionDeletionError,
    VersionNotFoundError,
    sort_decks,
)

__all__ = [
    # Catalog
    "CardCatalog",
    "CardFilters",
    "TcgFilters",
    "get_catalog",
    "load_catalog",
    "matches_filters",
    "matches_tcg_filters",
    # Card backend
    "CardFetchError",
    "CardPage",
    "fetch_all_cards",
    "fetch_card_page",
    "search_cards_by_name",
    # Deck store
    "BuilderSnapshot",
    "DeckFilters",
    "DeckNotFoundError",
    "DeckPersistence",
    "DeckStore",
    "DeckStoreError",
    "InMemoryDeckPersistence",
    "JsonFileDeckPersistence",
    "VersionDeletionError",
    "VersionNotFoundError",
    "sort_decks",
]

"""
Card catalog.

Holds the full card list and exposes filtered views. Two filter sets
exist: the deck builder's multi-select facets (colors, types, rarities,
cost, sets) and the library's single-value TCG filters with a BP range.
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from gundeck.config import settings
from gundeck.models.card import Card
from gundeck.parsers.card_data import is_present, load_cards, parse_stat

logger = logging.getLogger(__name__)

# Cost filter value meaning "this cost or higher"
TOP_COST_BUCKET = 6


@dataclass
class CardFilters:
    """
    Deck builder filters. Empty fields do not filter.

    Attributes:
        search: Case-insensitive substring of the card name or id
        colors: Card matches if it has any of these colors
        types: Allowed categories
        rarities: Allowed rarities
        cost: Exact cost, or "6" for cost 6 and up
        sets: Allowed sets
    """

    search: str = ""
    colors: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)
    rarities: list[str] = field(default_factory=list)
    cost: str = ""
    sets: list[str] = field(default_factory=list)


@dataclass
class TcgFilters:
    """
    Library filters for rich card records. Empty fields do not filter.

    Attributes:
        query: Substring of name, effect, description or code
        min_bp: Lower BP bound; cards without a BP are excluded when set
        max_bp: Upper BP bound; cards without a BP are excluded when set
    """

    query: str = ""
    type: str = ""
    rarity: str = ""
    set_name: str = ""
    affinity: str = ""
    min_bp: int | None = None
    max_bp: int | None = None


def _matches_cost(card: Card, cost_filter: str) -> bool:
    wanted = parse_stat(cost_filter)
    if wanted is None:
        return True
    if card.cost is None:
        return False
    if wanted >= TOP_COST_BUCKET:
        return card.cost >= TOP_COST_BUCKET
    return card.cost == wanted


def matches_filters(card: Card, filters: CardFilters) -> bool:
    """True if a card passes every deck builder filter."""
    if filters.search:
        needle = filters.search.lower()
        if needle not in card.name.lower() and needle not in card.id.lower():
            return False

    if filters.colors and not any(color in card.colors for color in filters.colors):
        return False

    if filters.types and card.category not in filters.types:
        return False

    if filters.rarities and card.rarity not in filters.rarities:
        return False

    if filters.cost and not _matches_cost(card, filters.cost):
        return False

    return not (filters.sets and card.set_name not in filters.sets)


def _contains(value: str | None, needle: str) -> bool:
    return value is not None and needle in value.lower()


def matches_tcg_filters(card: Card, filters: TcgFilters) -> bool:
    """True if a card passes every library filter."""
    query = filters.query.strip().lower()
    if query and not (
        query in card.name.lower()
        or _contains(card.effect, query)
        or _contains(card.description, query)
        or _contains(card.code, query)
    ):
        return False

    if filters.type and card.category != filters.type:
        return False
    if filters.rarity and card.rarity != filters.rarity:
        return False
    if filters.set_name and card.set_name != filters.set_name:
        return False
    if filters.affinity and card.affinity != filters.affinity:
        return False

    if filters.min_bp is not None or filters.max_bp is not None:
        bp = parse_stat(card.bp) or 0
        if bp == 0:
            return False
        if filters.min_bp is not None and bp < filters.min_bp:
            return False
        if filters.max_bp is not None and bp > filters.max_bp:
            return False

    return True


class CardCatalog:
    """In-memory card catalog."""

    def __init__(self, cards: list[Card] | None = None) -> None:
        self._cards: list[Card] = list(cards or [])
        self._by_id: dict[str, Card] = {card.id: card for card in self._cards}

    def __len__(self) -> int:
        return len(self._cards)

    @property
    def cards(self) -> list[Card]:
        return list(self._cards)

    def get(self, card_id: str) -> Card | None:
        """Look up a card by id."""
        return self._by_id.get(card_id)

    def filter(self, filters: CardFilters) -> list[Card]:
        """Cards passing the deck builder filters, in catalog order."""
        return [card for card in self._cards if matches_filters(card, filters)]

    def search(self, filters: TcgFilters) -> list[Card]:
        """Cards passing the library filters, in catalog order."""
        return [card for card in self._cards if matches_tcg_filters(card, filters)]

    def available_values(self, attribute: str) -> list[str]:
        """
        Distinct values of a card attribute, sorted, for building facet menus.

        Tuple attributes (colors, abilities) are flattened; empty and "-" values
        are skipped.
        """
        values: set[str] = set()
        for card in self._cards:
            value = getattr(card, attribute, None)
            if isinstance(value, tuple):
                values.update(str(v) for v in value if is_present(str(v)))
            elif value is not None and is_present(str(value)):
                values.add(str(value))
        return sorted(values)


def load_catalog(path: Path | None = None) -> CardCatalog:
    """
    Load the catalog from a JSON card file.

    A missing file gives an empty catalog; run the card sync job to
    populate it.
    """
    if path is None:
        path = settings.card_data_path

    if not path.exists():
        logger.warning("Card data not found at %s, starting with an empty catalog", path)
        return CardCatalog()

    cards = load_cards(path)
    logger.info("Loaded %d cards from %s", len(cards), path)
    return CardCatalog(cards)


@lru_cache(maxsize=1)
def get_catalog() -> CardCatalog:
    """Cached catalog, loaded once from settings.card_data_path."""
    return load_catalog()

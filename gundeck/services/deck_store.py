"""
Deck builder store.

Holds the builder's working state (the deck being edited, saved and
public decks, the player's collection and wishlist, likes and follows)
and exposes the operations the deck builder performs on it. Saved decks
are written through an injected DeckPersistence after every change.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from gundeck.analysis.comparison import ComparisonSimulator
from gundeck.config import MAX_COPIES
from gundeck.models.card import Card, DeckEntry
from gundeck.models.deck import Deck, DeckVersion, GameRecord, GameResult
from gundeck.models.stats import ComparisonReport
from gundeck.parsers.deck_data import deck_from_dict, deck_to_dict

logger = logging.getLogger(__name__)

SORT_KEYS = (
    "name-asc",
    "name-desc",
    "date-newest",
    "date-oldest",
    "value-high",
    "value-low",
    "cards-high",
    "cards-low",
    "winrate-high",
    "winrate-low",
)


class DeckStoreError(Exception):
    """Base error for deck store operations."""

    pass


class DeckNotFoundError(DeckStoreError):
    def __init__(self, deck_id: str) -> None:
        super().__init__(f"Deck not found: {deck_id}")
        self.deck_id = deck_id


class VersionNotFoundError(DeckStoreError):
    def __init__(self, deck_id: str, version_id: str) -> None:
        super().__init__(f"Version {version_id} not found in deck {deck_id}")
        self.deck_id = deck_id
        self.version_id = version_id


class VersionDeletionError(DeckStoreError):
    """Raised when deleting a deck's only remaining version."""

    pass


class DeckPersistence(Protocol):
    """Where saved decks live between sessions."""

    def load_decks(self) -> list[Deck]: ...

    def save_decks(self, decks: list[Deck]) -> None: ...


class InMemoryDeckPersistence:
    """Keeps decks in process memory. Used by tests and ephemeral sessions."""

    def __init__(self, decks: list[Deck] | None = None) -> None:
        self.decks: list[Deck] = list(decks or [])
        self.save_count = 0

    def load_decks(self) -> list[Deck]:
        return list(self.decks)

    def save_decks(self, decks: list[Deck]) -> None:
        self.decks = list(decks)
        self.save_count += 1


class JsonFileDeckPersistence:
    """Stores decks as a JSON array in a single file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load_decks(self) -> list[Deck]:
        if not self.path.exists():
            return []
        with open(self.path, encoding="utf-8") as f:
            records = json.load(f)
        return [deck_from_dict(record) for record in records]

    def save_decks(self, decks: list[Deck]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([deck_to_dict(deck) for deck in decks], f, indent=2)


@dataclass
class BuilderSnapshot:
    """Everything the deck builder holds in memory."""

    deck: list[DeckEntry] = field(default_factory=list)
    saved_decks: list[Deck] = field(default_factory=list)
    public_decks: list[Deck] = field(default_factory=list)
    collection: list[Card] = field(default_factory=list)
    wishlist: list[Card] = field(default_factory=list)
    liked_deck_ids: set[str] = field(default_factory=set)
    following: set[str] = field(default_factory=set)


@dataclass
class DeckFilters:
    """
    Saved deck list filters. Empty fields do not filter.

    Attributes:
        search: Substring of name, description or author (case-insensitive)
        colors: Deck matches if it uses any of these colors
        tags: Deck matches if it carries any of these tags
        sort_by: One of SORT_KEYS; unknown keys keep the stored order
    """

    search: str = ""
    colors: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    min_cards: int | None = None
    max_cards: int | None = None
    min_value: float | None = None
    max_value: float | None = None
    sort_by: str = "name-asc"


def _new_id() -> str:
    return uuid.uuid4().hex


def _snapshot_version(version: int, name: str, entries: list[DeckEntry], notes: str) -> DeckVersion:
    deck = Deck(id="", name=name, entries=list(entries))
    return DeckVersion(
        id=f"v{version}-{_new_id()}",
        version=version,
        name=name,
        entries=list(entries),
        notes=notes,
        total_cards=deck.total_cards(),
        market_value=deck.market_value(),
    )


def _matches_deck_filters(deck: Deck, filters: DeckFilters) -> bool:
    if filters.search:
        needle = filters.search.lower()
        haystacks = (deck.name, deck.description or "", deck.author or "")
        if not any(needle in text.lower() for text in haystacks):
            return False

    if filters.colors and not any(color in deck.colors() for color in filters.colors):
        return False

    if filters.tags and not any(tag in deck.tags for tag in filters.tags):
        return False

    total = deck.total_cards()
    if filters.min_cards is not None and total < filters.min_cards:
        return False
    if filters.max_cards is not None and total > filters.max_cards:
        return False

    value = deck.market_value()
    if filters.min_value is not None and value < filters.min_value:
        return False
    return not (filters.max_value is not None and value > filters.max_value)


def sort_decks(decks: list[Deck], sort_by: str) -> list[Deck]:
    """Sort decks by one of SORT_KEYS. Sorting is stable."""
    if sort_by == "name-asc":
        return sorted(decks, key=lambda d: d.name.lower())
    if sort_by == "name-desc":
        return sorted(decks, key=lambda d: d.name.lower(), reverse=True)
    if sort_by == "date-newest":
        return sorted(decks, key=lambda d: d.created_at, reverse=True)
    if sort_by == "date-oldest":
        return sorted(decks, key=lambda d: d.created_at)
    if sort_by == "value-high":
        return sorted(decks, key=lambda d: d.market_value(), reverse=True)
    if sort_by == "value-low":
        return sorted(decks, key=lambda d: d.market_value())
    if sort_by == "cards-high":
        return sorted(decks, key=lambda d: d.total_cards(), reverse=True)
    if sort_by == "cards-low":
        return sorted(decks, key=lambda d: d.total_cards())
    if sort_by == "winrate-high":
        return sorted(decks, key=lambda d: d.win_rate(), reverse=True)
    if sort_by == "winrate-low":
        return sorted(decks, key=lambda d: d.win_rate())
    return list(decks)


class DeckStore:
    """
    State container for the deck builder.

    Lookups that miss raise DeckNotFoundError or VersionNotFoundError;
    the builder's working deck is only replaced by explicit loads and
    reverts.
    """

    def __init__(self, persistence: DeckPersistence | None = None) -> None:
        self.persistence: DeckPersistence = persistence or InMemoryDeckPersistence()
        self.state = BuilderSnapshot(saved_decks=self.persistence.load_decks())

    # =========================================================================
    # Working deck
    # =========================================================================

    @property
    def deck(self) -> list[DeckEntry]:
        return list(self.state.deck)

    def _index_in_deck(self, card_id: str) -> int | None:
        for i, entry in enumerate(self.state.deck):
            if entry.card.id == card_id:
                return i
        return None

    def add_to_deck(self, card: Card) -> None:
        """Add one copy. Does nothing once the card is at MAX_COPIES."""
        index = self._index_in_deck(card.id)
        if index is None:
            self.state.deck.append(DeckEntry(card=card, quantity=1))
            return

        entry = self.state.deck[index]
        if entry.quantity >= MAX_COPIES:
            return
        self.state.deck[index] = DeckEntry(card=entry.card, quantity=entry.quantity + 1)

    def remove_from_deck(self, card: Card) -> None:
        """Remove one copy, dropping the entry at zero."""
        index = self._index_in_deck(card.id)
        if index is None:
            return

        entry = self.state.deck[index]
        if entry.quantity <= 1:
            del self.state.deck[index]
        else:
            self.state.deck[index] = DeckEntry(card=entry.card, quantity=entry.quantity - 1)

    def clear_deck(self) -> None:
        self.state.deck = []

    def quantities(self) -> dict[str, int]:
        """Copies of each card in the working deck, by card id."""
        return {entry.card.id: entry.quantity for entry in self.state.deck}

    # =========================================================================
    # Collection and wishlist
    # =========================================================================

    def add_to_collection(self, card: Card) -> None:
        self.state.collection.append(card)

    def remove_from_collection(self, card: Card) -> None:
        """Remove a single owned copy of a card."""
        for i, owned in enumerate(self.state.collection):
            if owned.id == card.id:
                del self.state.collection[i]
                return

    def add_to_wishlist(self, card: Card) -> None:
        if not any(wanted.id == card.id for wanted in self.state.wishlist):
            self.state.wishlist.append(card)

    def remove_from_wishlist(self, card: Card) -> None:
        self.state.wishlist = [wanted for wanted in self.state.wishlist if wanted.id != card.id]

    # =========================================================================
    # Saved decks and versions
    # =========================================================================

    @property
    def saved_decks(self) -> list[Deck]:
        return list(self.state.saved_decks)

    @property
    def public_decks(self) -> list[Deck]:
        return list(self.state.public_decks)

    def _persist(self) -> None:
        self.persistence.save_decks(self.state.saved_decks)

    def get_saved_deck(self, deck_id: str) -> Deck:
        for deck in self.state.saved_decks:
            if deck.id == deck_id:
                return deck
        raise DeckNotFoundError(deck_id)

    def _find_version(self, deck: Deck, version_id: str) -> DeckVersion:
        for version in deck.versions:
            if version.id == version_id:
                return version
        raise VersionNotFoundError(deck.id, version_id)

    def save_deck(self, author: str, name: str | None = None) -> Deck:
        """
        Save the working deck.

        A deck with the same name that already exists gets a new version
        instead of a duplicate.

        Args:
            author: Username saving the deck
            name: Deck name, defaults to "Current Deck - {author}"

        Returns:
            The created or updated deck
        """
        deck_name = name or f"Current Deck - {author}"

        for existing in self.state.saved_decks:
            if existing.name == deck_name:
                return self.save_new_version(existing.id)

        deck = Deck(
            id=_new_id(),
            name=deck_name,
            entries=list(self.state.deck),
            description="Auto-saved deck from deck builder",
            notes="",
            author=author,
        )
        deck.versions = [
            _snapshot_version(1, "Initial Version", self.state.deck, "Initial deck creation")
        ]
        self.state.saved_decks.append(deck)
        self._persist()

        logger.info("Saved deck %s (%d cards) for %s", deck.name, deck.total_cards(), author)
        return deck

    def save_new_version(self, deck_id: str, notes: str | None = None) -> Deck:
        """Append the working deck as the next version of a saved deck."""
        deck = self.get_saved_deck(deck_id)
        number = len(deck.versions) + 1

        version = _snapshot_version(
            number, f"Version {number}", self.state.deck, notes or "Updated deck"
        )
        deck.versions.append(version)
        deck.entries = list(self.state.deck)
        deck.updated_at = datetime.now(UTC)
        self._persist()

        logger.info("Saved %s of deck %s", version.name, deck.name)
        return deck

    def revert_to_version(self, deck_id: str, version_id: str) -> DeckVersion:
        """Replace the working deck with a saved version's cards."""
        deck = self.get_saved_deck(deck_id)
        version = self._find_version(deck, version_id)
        self.state.deck = list(version.entries)
        return version

    def delete_version(self, deck_id: str, version_id: str) -> DeckVersion:
        """
        Delete one version of a saved deck.

        Raises:
            VersionDeletionError: If it is the deck's only version
        """
        deck = self.get_saved_deck(deck_id)
        version = self._find_version(deck, version_id)

        if len(deck.versions) <= 1:
            raise VersionDeletionError("Cannot delete the only version of a deck.")

        deck.versions = [v for v in deck.versions if v.id != version_id]
        self._persist()
        return version

    def share_deck(
        self,
        author: str,
        name: str,
        description: str = "",
        notes: str = "",
        tags: list[str] | None = None,
        is_public: bool = False,
        allow_comments: bool = True,
        allow_forks: bool = True,
    ) -> Deck:
        """Save the working deck under a new name, publishing it when public."""
        deck = Deck(
            id=_new_id(),
            name=name,
            entries=list(self.state.deck),
            description=description,
            notes=notes,
            is_public=is_public,
            author=author,
            tags=list(tags or []),
            allow_comments=allow_comments,
            allow_forks=allow_forks,
        )
        self.state.saved_decks.append(deck)
        if is_public:
            self.state.public_decks.append(deck)
        self._persist()

        logger.info("Deck %s: %s", "shared publicly" if is_public else "saved privately", name)
        return deck

    def load_saved_deck(self, deck_id: str) -> Deck:
        deck = self.get_saved_deck(deck_id)
        self.state.deck = list(deck.entries)
        return deck

    def load_public_deck(self, deck_id: str) -> Deck:
        for deck in self.state.public_decks:
            if deck.id == deck_id:
                self.state.deck = list(deck.entries)
                return deck
        raise DeckNotFoundError(deck_id)

    def delete_saved_deck(self, deck_id: str) -> Deck:
        deck = self.get_saved_deck(deck_id)
        self.state.saved_decks = [d for d in self.state.saved_decks if d.id != deck_id]
        self._persist()
        return deck

    def add_game_record(self, deck_id: str, record: GameRecord) -> Deck:
        """Append a game to a deck's history and update its win/loss tally."""
        deck = self.get_saved_deck(deck_id)
        deck.game_history.append(record)
        if record.result is GameResult.WIN:
            deck.wins += 1
        elif record.result is GameResult.LOSS:
            deck.losses += 1
        self._persist()
        return deck

    # =========================================================================
    # Community
    # =========================================================================

    def toggle_like(self, deck_id: str) -> bool:
        """
        Like or unlike a deck. Returns True if the deck is now liked.

        The like count of the deck moves with it, wherever the deck is held
        (saved, public or both).
        """
        liked = self.state.liked_deck_ids
        now_liked = deck_id not in liked
        if now_liked:
            liked.add(deck_id)
        else:
            liked.discard(deck_id)

        touched: dict[int, Deck] = {}
        for deck in [*self.state.saved_decks, *self.state.public_decks]:
            if deck.id == deck_id:
                touched[id(deck)] = deck
        for deck in touched.values():
            deck.likes = deck.likes + 1 if now_liked else max(deck.likes - 1, 0)

        if touched:
            self._persist()
        return now_liked

    def toggle_follow(self, username: str) -> bool:
        """Follow or unfollow a user. Returns True if now following."""
        following = self.state.following
        if username in following:
            following.discard(username)
            return False
        following.add(username)
        return True

    # =========================================================================
    # Queries
    # =========================================================================

    def filter_decks(self, filters: DeckFilters) -> list[Deck]:
        """Saved decks matching the filters, sorted by filters.sort_by."""
        matching = [d for d in self.state.saved_decks if _matches_deck_filters(d, filters)]
        return sort_decks(matching, filters.sort_by)

    async def compare_saved_decks(
        self,
        deck1_id: str,
        deck2_id: str,
        simulator: ComparisonSimulator | None = None,
    ) -> ComparisonReport | None:
        """Compare two saved decks. Returns None if either is missing."""
        decks = {deck.id: deck for deck in self.state.saved_decks}
        deck1 = decks.get(deck1_id)
        deck2 = decks.get(deck2_id)
        if deck1 is None or deck2 is None:
            return None

        simulator = simulator or ComparisonSimulator()
        return await simulator.compare(deck1, deck2)

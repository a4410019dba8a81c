from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from gundeck.models.card import DeckEntry


def _now() -> datetime:
    return datetime.now(UTC)


class GameResult(str, Enum):
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


@dataclass
class GameRecord:
    """A single recorded game played with a deck."""

    id: str
    opponent: str
    result: GameResult
    date: datetime = field(default_factory=_now)
    format: str = "Standard"
    notes: str | None = None


@dataclass
class DeckVersion:
    """A saved snapshot of a deck's card list."""

    id: str
    version: int
    name: str
    entries: list[DeckEntry] = field(default_factory=list)
    created_at: datetime = field(default_factory=_now)
    notes: str | None = None
    total_cards: int = 0
    market_value: float = 0.0


@dataclass
class Deck:
    """
    A saved deck with its metadata.

    Attributes:
        id: Deck identifier
        name: Deck name
        entries: Ordered card entries
        is_public: Whether the deck is shared with the community
        author: Username of the deck's owner
        wins: Recorded wins
        losses: Recorded losses
        versions: Saved version history, oldest first
        game_history: Recorded games, oldest first
    """

    id: str
    name: str
    entries: list[DeckEntry] = field(default_factory=list)
    description: str | None = None
    notes: str | None = None
    is_public: bool = False
    author: str | None = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    wins: int = 0
    losses: int = 0
    versions: list[DeckVersion] = field(default_factory=list)
    game_history: list[GameRecord] = field(default_factory=list)
    likes: int = 0
    allow_comments: bool = True
    allow_forks: bool = True

    def total_cards(self) -> int:
        """Total cards in the deck."""
        return sum(entry.quantity for entry in self.entries)

    def colors(self) -> list[str]:
        """De-duplicated colors across all entries, in first-seen order."""
        seen: dict[str, None] = {}
        for entry in self.entries:
            for color in entry.card.colors:
                seen.setdefault(color, None)
        return list(seen)

    def market_value(self) -> float:
        """Sum of market price times quantity; unpriced cards count as 0."""
        return sum((entry.card.market_price or 0.0) * entry.quantity for entry in self.entries)

    def win_rate(self) -> float:
        """Wins over decided games (0.0-1.0), 0.0 when nothing is recorded."""
        played = self.wins + self.losses
        return self.wins / played if played > 0 else 0.0

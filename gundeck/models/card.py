from dataclasses import dataclass
from enum import Enum


class CardKind(str, Enum):
    """Which of the two card record shapes a card was ingested from."""

    # Numeric cost and a list of colors
    SIMPLE = "simple"
    # String AP/BP values, a single affinity and an energy requirement
    RICH = "rich"


@dataclass(frozen=True, slots=True)
class Card:
    """
    Immutable card reference data.

    Attributes:
        id: Catalog identifier (card code for simple cards, tcgId for rich ones)
        name: Display name
        kind: Record shape, set once at ingestion
        category: Unit, Pilot, Command, Base (or the TCG equivalent)
        rarity: Rarity tag
        set_name: Set the card was printed in
        colors: Colors of a simple card
        cost: Play cost of a simple card (fractional costs are kept)
        ap: Raw AP string of a rich card (may be "-")
        bp: Raw BP string of a rich card (may be "-")
        affinity: Energy color of a rich card (may be "-")
        energy: Energy requirement of a rich card (may be "-")
        market_price: Optional market price per copy
    """

    id: str
    name: str
    kind: CardKind = CardKind.SIMPLE
    category: str | None = None
    rarity: str | None = None
    set_name: str | None = None
    colors: tuple[str, ...] = ()
    cost: float | None = None
    power: int | None = None
    hp: int | None = None
    level: int | None = None
    ap: str | None = None
    bp: str | None = None
    affinity: str | None = None
    energy: str | None = None
    code: str | None = None
    abilities: tuple[str, ...] = ()
    effect: str | None = None
    description: str | None = None
    image: str | None = None
    market_price: float | None = None

    @property
    def is_simple(self) -> bool:
        return self.kind is CardKind.SIMPLE

    @property
    def is_rich(self) -> bool:
        return self.kind is CardKind.RICH


@dataclass(frozen=True, slots=True)
class DeckEntry:
    """
    A card and how many copies of it a deck runs.

    Quantity is expected to be 1-4; the deck builder enforces the cap,
    analysis code does not re-validate it.
    """

    card: Card
    quantity: int = 1

    @property
    def name(self) -> str:
        return self.card.name

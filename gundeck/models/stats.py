"""
Derived analysis results.

Nothing here is persisted; every structure is recomputed from a deck
snapshot on each analysis call.
"""

from dataclasses import dataclass, field


@dataclass
class CompositionStats:
    """
    Aggregate composition of a deck.

    Attributes:
        total_cards: Sum of entry quantities
        unique_cards: Number of entries
        average_cost: Mean cost over cards with a defined cost, one decimal
        average_bp: Mean BP over cards with a numeric BP, no decimals
        completion: Fraction of a full 50-card deck (capped at 1.0)
        simple_cards: Copies ingested from the simple card shape
        rich_cards: Copies ingested from the rich card shape
    """

    total_cards: int = 0
    unique_cards: int = 0
    average_cost: str = "0.0"
    type_counts: dict[str, int] = field(default_factory=dict)
    color_counts: dict[str, int] = field(default_factory=dict)
    affinity_counts: dict[str, int] = field(default_factory=dict)
    rarity_counts: dict[str, int] = field(default_factory=dict)
    energy_requirements: dict[str, int] = field(default_factory=dict)
    set_counts: dict[str, int] = field(default_factory=dict)
    total_ap: int = 0
    total_bp: int = 0
    average_bp: str = "0"
    completion: float = 0.0
    simple_cards: int = 0
    rich_cards: int = 0

    @property
    def mixed(self) -> bool:
        """True if the deck holds cards of both record shapes."""
        return self.simple_cards > 0 and self.rich_cards > 0

    def count_of(self, category: str) -> int:
        """Copies of a given card category (0 if absent)."""
        return self.type_counts.get(category, 0)


@dataclass
class NumericSummary:
    """Summary of one numeric card attribute across a deck."""

    total: int = 0
    average: str = "0"
    minimum: int = 0
    maximum: int = 0
    distribution: dict[int, int] = field(default_factory=dict)


@dataclass
class CardStatistics:
    """Per-card statistics for decks built from rich card records."""

    total_cards: int
    ap: NumericSummary
    bp: NumericSummary
    type_counts: dict[str, int] = field(default_factory=dict)
    rarity_counts: dict[str, int] = field(default_factory=dict)
    affinity_counts: dict[str, int] = field(default_factory=dict)
    energy_requirements: dict[str, int] = field(default_factory=dict)
    set_counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class MatchupOdds:
    """Static odds against one reference archetype."""

    opponent: str
    rating: str  # Favorable, Even, Unfavorable
    percentage: int


@dataclass(frozen=True, slots=True)
class MetaPosition:
    """Where a color pairing sits in the current metagame."""

    tier: str
    headline: str
    summary: str


@dataclass
class ScoreReport:
    """
    Heuristic evaluation of a deck.

    Attributes:
        score: Deck score clamped to 1.0-10.0
        archetype: Inferred play style
        confidence: High or Medium
        verdict: One-sentence reading of the score
        strengths: Strength lines, in rule order
        weaknesses: Weakness lines, in rule order
        suggestions: Alternative card suggestions, in rule order
        recommendations: Actionable recommendations, in rule order
        matchups: Fixed odds against reference archetypes
        meta_positions: Metagame blurbs for the deck's color pairings
    """

    score: float
    archetype: str
    confidence: str
    verdict: str
    composition: CompositionStats
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    matchups: list[MatchupOdds] = field(default_factory=list)
    meta_positions: list[MetaPosition] = field(default_factory=list)


@dataclass
class ComparisonReport:
    """Outcome of a simulated head-to-head comparison of two decks."""

    deck1_name: str
    deck2_name: str
    win_probability: int
    predicted_wins: int
    overall_summary: str
    deck1_strengths: list[str] = field(default_factory=list)
    deck1_weaknesses: list[str] = field(default_factory=list)
    deck2_strengths: list[str] = field(default_factory=list)
    deck2_weaknesses: list[str] = field(default_factory=list)
    strategic_recommendations: list[str] = field(default_factory=list)
    alternative_cards: dict[str, list[str]] = field(default_factory=dict)
    key_matchup_factors: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class LegalityResult:
    """Outcome of one tournament rule."""

    rule_id: str
    rule: str
    description: str
    passed: bool
    message: str
    details: str | None = None


@dataclass
class LegalityReport:
    """All tournament rule outcomes for a deck."""

    results: list[LegalityResult] = field(default_factory=list)

    @property
    def is_legal(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def violations(self) -> list[LegalityResult]:
        return [result for result in self.results if not result.passed]


@dataclass
class MatchupRecord:
    wins: int = 0
    losses: int = 0
    draws: int = 0


@dataclass
class RecordSummary:
    """Win/loss summary of a deck's recorded games."""

    wins: int = 0
    losses: int = 0
    draws: int = 0
    total_games: int = 0
    win_rate: int = 0  # rounded percent
    matchups: dict[str, MatchupRecord] = field(default_factory=dict)

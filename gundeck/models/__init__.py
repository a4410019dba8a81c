from gundeck.models.card import Card, CardKind, DeckEntry
from gundeck.models.deck import Deck, DeckVersion, GameRecord, GameResult
from gundeck.models.stats import (
    CardStatistics,
    ComparisonReport,
    CompositionStats,
    LegalityReport,
    LegalityResult,
    MatchupOdds,
    MatchupRecord,
    MetaPosition,
    NumericSummary,
    RecordSummary,
    ScoreReport,
)

__all__ = [
    "Card",
    "CardKind",
    "CardStatistics",
    "ComparisonReport",
    "CompositionStats",
    "Deck",
    "DeckEntry",
    "DeckVersion",
    "GameRecord",
    "GameResult",
    "LegalityReport",
    "LegalityResult",
    "MatchupOdds",
    "MatchupRecord",
    "MetaPosition",
    "NumericSummary",
    "RecordSummary",
    "ScoreReport",
]

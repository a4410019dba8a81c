from gundeck.analysis.comparison import ComparisonSimulator, compare_decks
from gundeck.analysis.composition import aggregate, card_statistics, completion_ratio, top_counts
from gundeck.analysis.legality import TOURNAMENT_RULES, check_legality, evaluate_legality
from gundeck.analysis.records import summarize_records
from gundeck.analysis.scoring import infer_archetype, matchup_odds, score_deck

__all__ = [
    "ComparisonSimulator",
    "TOURNAMENT_RULES",
    "aggregate",
    "card_statistics",
    "check_legality",
    "compare_decks",
    "completion_ratio",
    "evaluate_legality",
    "infer_archetype",
    "matchup_odds",
    "score_deck",
    "summarize_records",
    "top_counts",
]

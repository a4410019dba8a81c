"""Win/loss summaries over a deck's recorded games."""

import math
from collections.abc import Sequence

from gundeck.models.deck import GameRecord, GameResult
from gundeck.models.stats import MatchupRecord, RecordSummary


def summarize_records(game_history: Sequence[GameRecord]) -> RecordSummary:
    """
    Summarize recorded games.

    Draws are tallied but not counted as played games, so the win rate is
    wins over wins plus losses, as a percent rounded half up (0 with no
    games).
    """
    summary = RecordSummary()

    for game in game_history:
        record = summary.matchups.setdefault(game.opponent, MatchupRecord())
        if game.result is GameResult.WIN:
            summary.wins += 1
            record.wins += 1
        elif game.result is GameResult.LOSS:
            summary.losses += 1
            record.losses += 1
        else:
            summary.draws += 1
            record.draws += 1

    summary.total_games = summary.wins + summary.losses
    if summary.total_games > 0:
        summary.win_rate = math.floor(summary.wins / summary.total_games * 100 + 0.5)
    return summary

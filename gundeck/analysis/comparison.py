"""
Simulated head-to-head deck comparison.

Presented to players as an AI matchup analysis, but nothing is inferred:
the win probability is a bounded random draw and the narrative is
templated around the two deck names. The call is asynchronous and waits
out a simulated latency so callers treat it like a slow remote analysis.
"""

import asyncio
import logging
import math
import random
from collections.abc import Callable

from gundeck.config import settings
from gundeck.models.deck import Deck
from gundeck.models.stats import ComparisonReport

logger = logging.getLogger(__name__)

MIN_WIN_PROBABILITY = 40
MAX_WIN_PROBABILITY = 70

AnalyzingObserver = Callable[[bool], None]


def predicted_wins_for(win_probability: int) -> int:
    """Wins out of 10, rounding halves up (45% -> 5)."""
    return math.floor(win_probability / 10 + 0.5)


def build_report(deck1_name: str, deck2_name: str, win_probability: int) -> ComparisonReport:
    """Fill the fixed comparison template for two deck names."""
    return ComparisonReport(
        deck1_name=deck1_name,
        deck2_name=deck2_name,
        win_probability=win_probability,
        predicted_wins=predicted_wins_for(win_probability),
        overall_summary=(
            f"Based on comprehensive analysis of both deck compositions, {deck1_name} shows a "
            f"{win_probability}% probability of victory against {deck2_name}. This matchup is "
            "determined by key factors including card synergies, mana curve efficiency, and "
            "strategic flexibility. The analysis considers unit distribution, command card "
            "effectiveness, and potential opening hand scenarios."
        ),
        deck1_strengths=[
            "Strong early game presence with efficient low-cost units",
            "Excellent card synergy between pilot and unit combinations",
            "Balanced mana curve allowing consistent plays each turn",
            "Multiple win conditions providing strategic flexibility",
        ],
        deck1_weaknesses=[
            "Vulnerable to aggressive rush strategies",
            "Limited late-game recovery options",
            "Dependent on specific card combinations for optimal performance",
        ],
        deck2_strengths=[
            "Powerful late-game units with high impact abilities",
            "Strong defensive capabilities and board control",
            "Consistent card draw and resource management",
            "Effective removal and disruption options",
        ],
        deck2_weaknesses=[
            "Slower setup time leaves early game vulnerable",
            "Higher mana curve may lead to inconsistent opening hands",
            "Limited early game interaction and tempo plays",
        ],
        strategic_recommendations=[
            "Focus on aggressive mulligan strategy to secure optimal opening hands",
            "Prioritize early board presence to establish tempo advantage",
            "Maintain card advantage through efficient trades and resource management",
            "Identify key timing windows for deploying high-impact combinations",
            "Adapt playstyle based on opponent's early game development",
            "Consider sideboard options for improved matchup coverage",
            "Practice optimal sequencing of plays to maximize synergy effects",
        ],
        alternative_cards={
            "deck1": [
                "Consider adding more early game removal to handle aggressive starts",
                "Include additional card draw engines for sustained pressure",
                "Add flexible utility cards that work in multiple scenarios",
            ],
            "deck2": [
                "Include more early game defensive options and cheap units",
                "Add ramp or acceleration effects to reach late game faster",
                "Consider more versatile mid-range threats for tempo plays",
            ],
        },
        key_matchup_factors=[
            "Opening hand quality and mulligan decisions",
            "Early game board development and tempo control",
            "Resource management and card advantage",
            "Timing of key combo pieces and synergies",
            "Adaptation to opponent's strategy and counter-play",
            "Late game threat density and closing power",
        ],
    )


class ComparisonSimulator:
    """
    Runs simulated deck comparisons and tracks whether one is in flight.

    Observers subscribed with `subscribe` are called with True when the
    first of any overlapping analyses starts and False once the last one
    resolves (or is cancelled).
    """

    def __init__(self, latency: float | None = None, rng: random.Random | None = None) -> None:
        """
        Args:
            latency: Simulated latency in seconds. Defaults to
                settings.comparison_latency_seconds; pass 0 in tests.
            rng: Random source for the win probability draw
        """
        self.latency = settings.comparison_latency_seconds if latency is None else latency
        self._rng = rng or random.Random()
        self._observers: list[AnalyzingObserver] = []
        self._in_flight = 0
        self.is_analyzing = False

    def subscribe(self, observer: AnalyzingObserver) -> None:
        self._observers.append(observer)

    def unsubscribe(self, observer: AnalyzingObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _set_analyzing(self, value: bool) -> None:
        self.is_analyzing = value
        for observer in list(self._observers):
            observer(value)

    async def compare(self, deck1: Deck, deck2: Deck) -> ComparisonReport:
        """
        Compare two decks.

        Args:
            deck1: Deck whose win probability is reported
            deck2: Opposing deck

        Returns:
            ComparisonReport with a win probability in [40, 70]
        """
        self._in_flight += 1
        if self._in_flight == 1:
            self._set_analyzing(True)
        try:
            if self.latency > 0:
                await asyncio.sleep(self.latency)
            win_probability = self._rng.randint(MIN_WIN_PROBABILITY, MAX_WIN_PROBABILITY)
            logger.info(
                "Compared %s vs %s: %d%% win probability",
                deck1.name,
                deck2.name,
                win_probability,
            )
            return build_report(deck1.name, deck2.name, win_probability)
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._set_analyzing(False)


async def compare_decks(
    deck1: Deck,
    deck2: Deck,
    latency: float | None = None,
    rng: random.Random | None = None,
) -> ComparisonReport:
    """Compare two decks with a one-off simulator."""
    return await ComparisonSimulator(latency=latency, rng=rng).compare(deck1, deck2)

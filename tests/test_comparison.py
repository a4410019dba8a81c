import asyncio
import random

import pytest

from gundeck.analysis.comparison import (
    MAX_WIN_PROBABILITY,
    MIN_WIN_PROBABILITY,
    ComparisonSimulator,
    build_report,
    compare_decks,
    predicted_wins_for,
)
from gundeck.models import Deck


@pytest.fixture
def decks() -> tuple[Deck, Deck]:
    return Deck(id="a", name="Zeon Rush"), Deck(id="b", name="Federation Wall")


class TestPredictedWins:
    @pytest.mark.parametrize(
        ("probability", "wins"),
        [(40, 4), (44, 4), (45, 5), (55, 6), (65, 7), (70, 7)],
    )
    def test_rounds_halves_up(self, probability: int, wins: int) -> None:
        assert predicted_wins_for(probability) == wins


class TestBuildReport:
    def test_template_uses_deck_names(self) -> None:
        report = build_report("Zeon Rush", "Federation Wall", 55)

        assert report.win_probability == 55
        assert report.predicted_wins == 6
        assert "Zeon Rush shows a 55% probability of victory against Federation Wall" in (
            report.overall_summary
        )
        assert len(report.deck1_strengths) == 4
        assert len(report.strategic_recommendations) == 7
        assert set(report.alternative_cards) == {"deck1", "deck2"}
        assert len(report.key_matchup_factors) == 6


class TestComparisonSimulator:
    async def test_probability_within_bounds(self, decks: tuple[Deck, Deck]) -> None:
        simulator = ComparisonSimulator(latency=0, rng=random.Random(1))

        for _ in range(50):
            report = await simulator.compare(*decks)
            assert MIN_WIN_PROBABILITY <= report.win_probability <= MAX_WIN_PROBABILITY
            assert report.predicted_wins == predicted_wins_for(report.win_probability)

    async def test_reports_deck_names(self, decks: tuple[Deck, Deck]) -> None:
        report = await ComparisonSimulator(latency=0).compare(*decks)

        assert report.deck1_name == "Zeon Rush"
        assert report.deck2_name == "Federation Wall"

    async def test_seeded_rng_is_reproducible(self, decks: tuple[Deck, Deck]) -> None:
        first = await ComparisonSimulator(latency=0, rng=random.Random(42)).compare(*decks)
        second = await ComparisonSimulator(latency=0, rng=random.Random(42)).compare(*decks)

        assert first == second

    async def test_observers_see_analyzing_flag(self, decks: tuple[Deck, Deck]) -> None:
        simulator = ComparisonSimulator(latency=0)
        seen: list[bool] = []
        simulator.subscribe(seen.append)

        await simulator.compare(*decks)

        assert seen == [True, False]
        assert simulator.is_analyzing is False

    async def test_unsubscribe(self, decks: tuple[Deck, Deck]) -> None:
        simulator = ComparisonSimulator(latency=0)
        seen: list[bool] = []
        simulator.subscribe(seen.append)
        simulator.unsubscribe(seen.append)

        await simulator.compare(*decks)

        assert seen == []

    async def test_analyzing_while_waiting(self, decks: tuple[Deck, Deck]) -> None:
        simulator = ComparisonSimulator(latency=0.05)

        task = asyncio.create_task(simulator.compare(*decks))
        await asyncio.sleep(0)
        assert simulator.is_analyzing is True

        await task
        assert simulator.is_analyzing is False

    async def test_cancel_clears_flag(self, decks: tuple[Deck, Deck]) -> None:
        simulator = ComparisonSimulator(latency=10)

        task = asyncio.create_task(simulator.compare(*decks))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert simulator.is_analyzing is False

    async def test_overlapping_comparisons(self, decks: tuple[Deck, Deck]) -> None:
        simulator = ComparisonSimulator(latency=10)
        seen: list[bool] = []
        simulator.subscribe(seen.append)

        first = asyncio.create_task(simulator.compare(*decks))
        second = asyncio.create_task(simulator.compare(*decks))
        await asyncio.sleep(0)

        first.cancel()
        with pytest.raises(asyncio.CancelledError):
            await first
        assert simulator.is_analyzing is True
        assert seen == [True]

        second.cancel()
        with pytest.raises(asyncio.CancelledError):
            await second
        assert simulator.is_analyzing is False
        assert seen == [True, False]

    def test_latency_defaults_to_settings(self) -> None:
        assert ComparisonSimulator().latency == 2.0


class TestCompareDecks:
    async def test_one_off_comparison(self, decks: tuple[Deck, Deck]) -> None:
        report = await compare_decks(*decks, latency=0, rng=random.Random(3))

        assert MIN_WIN_PROBABILITY <= report.win_probability <= MAX_WIN_PROBABILITY

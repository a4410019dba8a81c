"""
Deck composition aggregation.

Turns a list of deck entries into counts and averages. Card data is
often partial (rich records carry "-" for stats that do not apply), so
every field is treated as optional: missing or sentinel values are
skipped, never raised on.
"""

from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from gundeck.config import DECK_SIZE
from gundeck.models.card import DeckEntry
from gundeck.models.stats import CardStatistics, CompositionStats, NumericSummary
from gundeck.parsers.card_data import is_present, parse_stat


def to_fixed(value: float, decimals: int) -> str:
    """
    Format a number with a fixed count of decimals, rounding halves up.

    The float is taken at its exact binary value, so 2.25 gives "2.3"
    while 1.005 (stored just below) gives "1.00".
    """
    exponent = Decimal(1).scaleb(-decimals)
    return str(Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP))


def _bump(counts: dict[str, int], key: str | None, quantity: int) -> None:
    if is_present(key):
        counts[key] = counts.get(key, 0) + quantity  # type: ignore[index]


def aggregate(entries: Sequence[DeckEntry]) -> CompositionStats:
    """
    Aggregate the composition of a deck.

    Args:
        entries: Deck entries; quantities are taken as given

    Returns:
        CompositionStats with totals, per-category counts and averages
    """
    stats = CompositionStats(unique_cards=len(entries))

    cost_total: float = 0
    cost_count = 0
    bp_count = 0

    for entry in entries:
        card = entry.card
        quantity = entry.quantity
        stats.total_cards += quantity

        _bump(stats.type_counts, card.category, quantity)
        _bump(stats.rarity_counts, card.rarity, quantity)
        _bump(stats.set_counts, card.set_name, quantity)

        if card.is_simple:
            stats.simple_cards += quantity
            if card.cost is not None:
                cost_total += card.cost * quantity
                cost_count += quantity
            for color in card.colors:
                _bump(stats.color_counts, color, quantity)
            continue

        stats.rich_cards += quantity

        ap = parse_stat(card.ap)
        if ap is not None:
            stats.total_ap += ap * quantity

        bp = parse_stat(card.bp)
        if bp is not None:
            stats.total_bp += bp * quantity
            bp_count += quantity

        _bump(stats.affinity_counts, card.affinity, quantity)
        _bump(stats.energy_requirements, card.energy, quantity)

    stats.average_cost = to_fixed(cost_total / cost_count, 1) if cost_count > 0 else "0.0"
    stats.average_bp = to_fixed(stats.total_bp / bp_count, 0) if bp_count > 0 else "0"
    stats.completion = completion_ratio(stats.total_cards)

    return stats


def completion_ratio(total_cards: int) -> float:
    """Fraction of a full tournament deck, capped at 1.0."""
    return min(total_cards / DECK_SIZE, 1.0)


def _summarize(values: Iterable[tuple[int, int]], decimals: int) -> NumericSummary:
    """Summarize (value, copies) pairs."""
    summary = NumericSummary()
    count = 0
    minimum: int | None = None
    maximum: int | None = None

    for value, copies in values:
        summary.total += value * copies
        count += copies
        summary.distribution[value] = summary.distribution.get(value, 0) + copies
        minimum = value if minimum is None else min(minimum, value)
        maximum = value if maximum is None else max(maximum, value)

    if count > 0:
        summary.average = to_fixed(summary.total / count, decimals)
    else:
        summary.average = to_fixed(0, decimals)
    summary.minimum = minimum or 0
    summary.maximum = maximum or 0
    return summary


def card_statistics(entries: Sequence[DeckEntry]) -> CardStatistics:
    """
    Per-card statistics for AP/BP based decks.

    Every copy counts once. AP is averaged to one decimal, BP to none.

    Args:
        entries: Deck entries

    Returns:
        CardStatistics with AP/BP summaries and category counts
    """
    ap_values: list[tuple[int, int]] = []
    bp_values: list[tuple[int, int]] = []
    stats = CardStatistics(
        total_cards=sum(entry.quantity for entry in entries),
        ap=NumericSummary(),
        bp=NumericSummary(),
    )

    for entry in entries:
        card = entry.card
        quantity = entry.quantity

        ap = parse_stat(card.ap)
        if ap is not None:
            ap_values.append((ap, quantity))
        bp = parse_stat(card.bp)
        if bp is not None:
            bp_values.append((bp, quantity))

        _bump(stats.type_counts, card.category, quantity)
        _bump(stats.rarity_counts, card.rarity, quantity)
        _bump(stats.affinity_counts, card.affinity, quantity)
        _bump(stats.energy_requirements, card.energy, quantity)
        _bump(stats.set_counts, card.set_name, quantity)

    stats.ap = _summarize(ap_values, decimals=1)
    stats.bp = _summarize(bp_values, decimals=0)
    return stats


def top_counts(counts: dict[str, int], n: int = 3) -> list[tuple[str, int]]:
    """Most common entries of a count map; ties keep insertion order."""
    return sorted(counts.items(), key=lambda item: -item[1])[:n]

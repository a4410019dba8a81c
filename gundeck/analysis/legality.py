"""
Tournament legality checks.

Each rule is evaluated independently against the full entry list and
reports pass/fail with a remediation hint when it fails. The color limit
(2) and the softer color balance check (3) overlap on purpose; both are
reported.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from gundeck.config import BANNED_CARDS, DECK_SIZE, MAX_COLORS, MAX_COLORS_SOFT, MAX_COPIES
from gundeck.models.card import DeckEntry
from gundeck.models.stats import LegalityReport, LegalityResult


def _deck_colors(entries: Sequence[DeckEntry]) -> list[str]:
    seen: dict[str, None] = {}
    for entry in entries:
        for color in entry.card.colors:
            seen.setdefault(color, None)
    return list(seen)


def _check_deck_size(entries: Sequence[DeckEntry]) -> tuple[bool, str, str | None]:
    total = sum(entry.quantity for entry in entries)
    if total == DECK_SIZE:
        return True, "Valid deck size", None
    details = (
        f"Add more cards to reach {DECK_SIZE}"
        if total < DECK_SIZE
        else f"Remove cards to reach exactly {DECK_SIZE}"
    )
    return False, f"Invalid deck size: {total}/{DECK_SIZE} cards", details


def _check_card_copies(entries: Sequence[DeckEntry]) -> tuple[bool, str, str | None]:
    violations = [entry.name for entry in entries if entry.quantity > MAX_COPIES]
    if not violations:
        return True, "All card limits respected", None
    return (
        False,
        f"{len(violations)} cards exceed limit",
        f"Reduce copies of: {', '.join(violations)}",
    )


def _check_color_limit(entries: Sequence[DeckEntry]) -> tuple[bool, str, str | None]:
    colors = _deck_colors(entries)
    if len(colors) <= MAX_COLORS:
        return True, "Valid color distribution", None
    return (
        False,
        f"Too many colors: {len(colors)}/{MAX_COLORS} maximum",
        f"Reduce to maximum {MAX_COLORS} colors. Current colors: {', '.join(colors)}",
    )


def _check_banned_cards(entries: Sequence[DeckEntry]) -> tuple[bool, str, str | None]:
    violations = [entry.name for entry in entries if entry.name in BANNED_CARDS]
    if not violations:
        return True, "No banned cards detected", None
    return (
        False,
        f"{len(violations)} banned cards found",
        f"Remove: {', '.join(violations)}",
    )


def _check_color_balance(entries: Sequence[DeckEntry]) -> tuple[bool, str, str | None]:
    if len(_deck_colors(entries)) <= MAX_COLORS_SOFT:
        return True, "Good color distribution", None
    return (
        False,
        "Too many colors may cause consistency issues",
        "Consider focusing on fewer colors for better consistency",
    )


@dataclass(frozen=True)
class LegalityRule:
    """A named tournament rule."""

    id: str
    name: str
    description: str
    check: Callable[[Sequence[DeckEntry]], tuple[bool, str, str | None]]

    def evaluate(self, entries: Sequence[DeckEntry]) -> LegalityResult:
        passed, message, details = self.check(entries)
        return LegalityResult(
            rule_id=self.id,
            rule=self.name,
            description=self.description,
            passed=passed,
            message=message,
            details=details,
        )


TOURNAMENT_RULES: tuple[LegalityRule, ...] = (
    LegalityRule(
        "deck-size",
        "Deck Size",
        f"Deck must contain exactly {DECK_SIZE} cards",
        _check_deck_size,
    ),
    LegalityRule(
        "card-limit",
        "Card Copies",
        f"Maximum {MAX_COPIES} copies of any single card",
        _check_card_copies,
    ),
    LegalityRule(
        "color-limit",
        "Color Limit",
        f"Maximum {MAX_COLORS} colors allowed per deck",
        _check_color_limit,
    ),
    LegalityRule(
        "banned-cards",
        "Banned Cards",
        "No banned cards allowed",
        _check_banned_cards,
    ),
    LegalityRule(
        "color-requirements",
        "Color Balance",
        "Deck should have reasonable color distribution",
        _check_color_balance,
    ),
)


def check_legality(entries: Sequence[DeckEntry]) -> list[LegalityResult]:
    """Evaluate every tournament rule, in rule order."""
    return [rule.evaluate(entries) for rule in TOURNAMENT_RULES]


def evaluate_legality(entries: Sequence[DeckEntry]) -> LegalityReport:
    """Evaluate every rule; the deck is legal only if all of them pass."""
    return LegalityReport(results=check_legality(entries))

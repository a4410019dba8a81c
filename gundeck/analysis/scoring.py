"""
Heuristic deck scoring.

Scores a deck against fixed composition bands, infers its archetype from
its color pairing and curve, and collects strength/weakness/suggestion
lines from fixed rule tables.

Recommended composition for a 50-card deck:
- 25-28 Units
- 6-8 Pilots
- 8-10 Commands
- 4-6 Bases
- 16-20 Units at cost 3 or lower

All thresholds are business rules, not tunables. Rules in each table are
independent: every rule that applies contributes its lines, in table order.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace

from gundeck.analysis.composition import aggregate
from gundeck.models.card import DeckEntry
from gundeck.models.stats import CompositionStats, MatchupOdds, MetaPosition, ScoreReport

logger = logging.getLogger(__name__)

BASE_SCORE = 5.0
MIN_SCORE = 1.0
MAX_SCORE = 10.0

# Units at or below this cost count toward the early curve
LOW_COST_THRESHOLD = 3


@dataclass(frozen=True)
class DeckProfile:
    """Composition facts the scoring rules read."""

    unit_count: int
    pilot_count: int
    command_count: int
    base_count: int
    low_cost_unit_count: int
    average_cost: float
    average_cost_label: str
    colors: tuple[str, ...]
    total_cards: int
    archetype: str = "Midrange"

    def has(self, *colors: str) -> bool:
        return all(color in self.colors for color in colors)

    @property
    def color_count(self) -> int:
        return len(self.colors)

    @property
    def low_cost_shortfall(self) -> int:
        return 16 - self.low_cost_unit_count

    @property
    def unit_shortfall(self) -> int:
        return 25 - self.unit_count

    @property
    def pilot_shortfall(self) -> int:
        return 6 - self.pilot_count

    @property
    def command_shortfall(self) -> int:
        return 8 - self.command_count

    @property
    def base_shortfall(self) -> int:
        return 4 - self.base_count

    @property
    def archetype_lower(self) -> str:
        return self.archetype.lower()

    @property
    def is_control(self) -> bool:
        return self.archetype == "Control"

    @property
    def is_aggro(self) -> bool:
        return self.archetype == "Aggro"


@dataclass(frozen=True)
class Rule:
    """A predicate and the lines it contributes when it holds."""

    applies: Callable[[DeckProfile], bool]
    lines: tuple[str, ...]

    def render(self, profile: DeckProfile) -> list[str]:
        return [line.format(p=profile) for line in self.lines]


def build_profile(entries: Sequence[DeckEntry], composition: CompositionStats) -> DeckProfile:
    """Collect the counts the scoring rules need."""
    low_cost = sum(
        entry.quantity
        for entry in entries
        if entry.card.category == "Unit"
        and entry.card.cost is not None
        and entry.card.cost <= LOW_COST_THRESHOLD
    )

    colors: dict[str, None] = {}
    for entry in entries:
        for color in entry.card.colors:
            colors.setdefault(color, None)

    average_cost = float(composition.average_cost)
    profile = DeckProfile(
        unit_count=composition.count_of("Unit"),
        pilot_count=composition.count_of("Pilot"),
        command_count=composition.count_of("Command"),
        base_count=composition.count_of("Base"),
        low_cost_unit_count=low_cost,
        average_cost=average_cost,
        average_cost_label=composition.average_cost,
        colors=tuple(colors),
        total_cards=composition.total_cards,
    )
    archetype, _ = infer_archetype(profile)
    return replace(profile, archetype=archetype)


def infer_archetype(profile: DeckProfile) -> tuple[str, str]:
    """
    Infer (archetype, confidence). First matching rule wins.

    Depends only on average cost, colors and base count, never on score.
    """
    if profile.average_cost <= 2.5 and (profile.has("Red") or profile.has("Green")):
        return "Aggro", "High"
    if profile.has("Blue", "White") or (profile.base_count >= 4 and profile.average_cost >= 3.5):
        return "Control", "High"
    if profile.has("Blue", "Green") or (profile.color_count == 2 and profile.average_cost >= 3.0):
        return "Combo/Midrange", "Medium"
    if profile.has("Purple", "Red") or profile.has("Purple", "Green"):
        return "Iron-Blooded Aggro", "High"
    return "Midrange", "Medium"


def _band(value: int, ideal: tuple[int, int], acceptable: tuple[int, int]) -> str | None:
    if ideal[0] <= value <= ideal[1]:
        return "ideal"
    if acceptable[0] <= value <= acceptable[1]:
        return "acceptable"
    return None


def compute_score(profile: DeckProfile) -> float:
    """Composition, curve and color adjustments on top of the base score, clamped."""
    score = BASE_SCORE

    unit_band = _band(profile.unit_count, (25, 28), (22, 31))
    if unit_band == "ideal":
        score += 1.0
    elif unit_band == "acceptable":
        score += 0.5
    else:
        score -= 0.5

    for count, ideal, acceptable in (
        (profile.pilot_count, (6, 8), (4, 10)),
        (profile.command_count, (8, 10), (6, 12)),
        (profile.base_count, (4, 6), (2, 8)),
    ):
        band = _band(count, ideal, acceptable)
        if band == "ideal":
            score += 0.5
        elif band == "acceptable":
            score += 0.2

    curve_band = _band(profile.low_cost_unit_count, (16, 20), (12, 24))
    if curve_band == "ideal":
        score += 1.0
    elif curve_band == "acceptable":
        score += 0.5
    elif profile.low_cost_unit_count < 10:
        score -= 1.0

    if profile.color_count == 2:
        score += 0.5
    elif profile.color_count == 1:
        score += 0.2
    elif profile.color_count > 2:
        score -= 1.0

    return round(max(MIN_SCORE, min(MAX_SCORE, score)), 1)


STRENGTH_RULES: tuple[Rule, ...] = (
    Rule(
        lambda p: 25 <= p.unit_count <= 28,
        ("Optimal Unit count ({p.unit_count}) provides strong battlefield presence",),
    ),
    Rule(
        lambda p: 6 <= p.pilot_count <= 8,
        ("Good Pilot coverage ({p.pilot_count}) enables consistent Link Unit strategies",),
    ),
    Rule(
        lambda p: 8 <= p.command_count <= 10,
        ("Balanced Command suite ({p.command_count}) provides tactical flexibility",),
    ),
    Rule(
        lambda p: 4 <= p.base_count <= 6,
        ("Strong defensive foundation with {p.base_count} Base cards",),
    ),
    Rule(
        lambda p: 16 <= p.low_cost_unit_count <= 20,
        ("Excellent early game curve with {p.low_cost_unit_count} low-cost Units",),
    ),
    Rule(
        lambda p: p.has("Blue", "White"),
        ("Blue/White synergy: Superior card advantage and defensive control",),
    ),
    Rule(
        lambda p: p.has("Red", "Green"),
        ("Red/Green synergy: Aggressive tempo with resource acceleration",),
    ),
    Rule(
        lambda p: p.has("Blue", "Green"),
        ("Blue/Green synergy: Combo potential with card draw and ramp",),
    ),
    Rule(
        lambda p: p.has("Purple", "Red"),
        ("Purple/Red synergy: Iron-Blooded Orphans aggressive berserker tactics",),
    ),
    Rule(
        lambda p: p.has("Purple", "Green"),
        ("Purple/Green synergy: Tekkadan resource management with brutal efficiency",),
    ),
    Rule(
        lambda p: p.color_count == 2,
        ("Optimal dual-color build balances power and consistency",),
    ),
)

WEAKNESS_RULES: tuple[Rule, ...] = (
    Rule(
        lambda p: p.unit_count < 25,
        (
            "Low Unit count ({p.unit_count}) - consider adding more for battlefield presence "
            "(recommended: 25-28)",
        ),
    ),
    Rule(
        lambda p: p.unit_count > 28,
        (
            "High Unit count ({p.unit_count}) may reduce tactical options - "
            "consider more Commands/Pilots",
        ),
    ),
    Rule(
        lambda p: p.pilot_count < 6,
        (
            "Insufficient Pilots ({p.pilot_count}) - add more to enable Link Unit strategies "
            "(recommended: 6-8)",
        ),
    ),
    Rule(
        lambda p: p.command_count < 8,
        (
            "Low Command count ({p.command_count}) - add tactical cards for answers and "
            "disruption (recommended: 8-10)",
        ),
    ),
    Rule(
        lambda p: p.base_count < 4 and p.is_control,
        (
            "Control deck needs more Bases ({p.base_count}) for shield protection "
            "(recommended: 4-6)",
        ),
    ),
    Rule(
        lambda p: p.low_cost_unit_count < 16,
        (
            "Insufficient early game ({p.low_cost_unit_count} low-cost Units) - add Level 3 "
            "or lower Units (recommended: 16-20)",
        ),
    ),
    Rule(
        lambda p: p.average_cost > 3.5 and p.is_aggro,
        (
            "High average cost ({p.average_cost_label}) conflicts with aggressive strategy - "
            "reduce high-cost cards",
        ),
    ),
    Rule(
        lambda p: p.average_cost < 2.5 and p.is_control,
        (
            "Low average cost ({p.average_cost_label}) may lack late-game power for "
            "control strategy",
        ),
    ),
    Rule(
        lambda p: p.color_count > 2,
        ("Too many colors ({p.color_count}) - limit to 2 colors maximum for consistency",),
    ),
    Rule(
        lambda p: p.color_count == 1 and p.total_cards >= 40,
        ("Mono-color build - consider adding a second color for more strategic options",),
    ),
)

SUGGESTION_RULES: tuple[Rule, ...] = (
    Rule(
        lambda p: p.low_cost_unit_count < 16,
        (
            "Add more Level 1-2 Units with efficient stats for early board presence",
            'Include Units with "Quick Strike" or similar abilities for immediate impact',
            "Consider low-cost Pilots that enhance multiple Unit types",
        ),
    ),
    Rule(
        lambda p: p.unit_count < 25,
        ("Add Level 3-4 Units with balanced stats and useful abilities",),
    ),
    Rule(
        lambda p: p.pilot_count < 6,
        ("Include more Pilots with broad Link compatibility",),
    ),
    Rule(
        lambda p: p.unit_count < 25 or p.pilot_count < 6,
        ("Consider Units with defensive abilities or card draw effects",),
    ),
    Rule(
        lambda p: p.average_cost < 2.5 and p.is_control,
        (
            "Add high-cost Units with game-ending abilities",
            "Include Commands that can swing the game in your favor",
            'Consider Units with "Newtype" or other powerful keywords',
        ),
    ),
    Rule(
        lambda p: p.command_count < 8,
        (
            "Add removal Commands to deal with problematic enemy Units",
            "Include card draw or search effects for consistency",
            "Consider Action-timing Commands for reactive plays",
        ),
    ),
    Rule(
        lambda p: p.has("Blue"),
        (
            "Federation Units with strong defensive abilities",
            "Commands that provide card advantage or counter enemy plays",
            "Pilots that enhance multiple Unit types for flexibility",
        ),
    ),
    Rule(
        lambda p: p.has("Red"),
        (
            "Zeon Units with high power and aggressive abilities",
            "Direct damage Commands to finish opponents quickly",
            "Pilots that boost attack power or enable multiple attacks",
        ),
    ),
    Rule(
        lambda p: p.has("Green"),
        (
            "Units with cost-efficient stats and utility abilities",
            "Resource acceleration Commands for faster deployment",
            "Pilots that provide long-term value and synergy",
        ),
    ),
    Rule(
        lambda p: p.has("Purple"),
        (
            'Tekkadan Units with "Alaya-Vijnana" system abilities',
            "Commands that benefit from damaged or destroyed Units",
            "Pilots that enhance berserker-style aggressive tactics",
        ),
    ),
    Rule(
        lambda p: p.has("White"),
        (
            "SEED Units with versatile abilities and combo potential",
            "Commands that provide tactical flexibility",
            "Pilots that enable powerful Link Unit combinations",
        ),
    ),
)

RECOMMENDATION_RULES: tuple[Rule, ...] = (
    # Curve optimization
    Rule(
        lambda p: p.low_cost_unit_count < 16,
        ("Add {p.low_cost_shortfall} more Level 3 or lower Units for early game presence",),
    ),
    Rule(
        lambda p: p.average_cost > 3.5,
        ("Replace some high-cost cards with Level 2-3 Units to improve curve",),
    ),
    Rule(
        lambda p: p.unit_count < 25,
        ("Add {p.unit_shortfall} more Units for optimal battlefield presence",),
    ),
    # Strategic balance
    Rule(
        lambda p: p.pilot_count < 6,
        ("Add {p.pilot_shortfall} more Pilots to enable Link Unit strategies",),
    ),
    Rule(
        lambda p: p.command_count < 8,
        ("Include {p.command_shortfall} more Commands for tactical flexibility and answers",),
    ),
    Rule(
        lambda p: p.base_count < 4 and p.is_control,
        ("Add {p.base_shortfall} more Bases for defensive control strategy",),
    ),
    # Color strategy
    Rule(
        lambda p: p.color_count > 2,
        ("Reduce to maximum 2 colors for better resource consistency",),
    ),
    Rule(
        lambda p: p.color_count == 1 and p.total_cards >= 40,
        ("Consider adding a complementary second color for more strategic options",),
    ),
    # Advanced strategy
    Rule(
        lambda p: True,
        (
            "Include Action-timing Commands for disruption and answers",
            "Ensure Pilots have multiple compatible Units for consistent Link strategies",
            "Balance proactive and reactive cards based on your {p.archetype_lower} strategy",
        ),
    ),
    Rule(
        lambda p: p.is_aggro,
        ('Consider "High-Maneuver" or unblockable Units to bypass defenses',),
    ),
    Rule(
        lambda p: p.is_control,
        ("Include card draw and shield recovery effects for long-game advantage",),
    ),
    Rule(
        lambda p: "Combo" in p.archetype,
        ("Add search effects to assemble key card combinations consistently",),
    ),
)

_AGGRO_ODDS = (
    MatchupOdds("Control", "Favorable", 65),
    MatchupOdds("Midrange", "Even", 50),
    MatchupOdds("Aggro", "Unfavorable", 40),
)
_CONTROL_ODDS = (
    MatchupOdds("Aggro", "Favorable", 70),
    MatchupOdds("Midrange", "Even", 55),
    MatchupOdds("Combo", "Unfavorable", 45),
)
_MIDRANGE_ODDS = (
    MatchupOdds("Aggro", "Even", 50),
    MatchupOdds("Control", "Favorable", 60),
    MatchupOdds("Midrange", "Even", 50),
)


def matchup_odds(archetype: str) -> list[MatchupOdds]:
    """
    Static odds for an archetype against the reference archetypes.

    Not computed from any opposing deck. Iron-Blooded Aggro has no table.
    """
    if archetype == "Aggro":
        return list(_AGGRO_ODDS)
    if archetype == "Control":
        return list(_CONTROL_ODDS)
    if archetype == "Midrange" or "Combo" in archetype:
        return list(_MIDRANGE_ODDS)
    return []


_META_POSITIONS: tuple[tuple[tuple[str, str], MetaPosition], ...] = (
    (
        ("Blue", "White"),
        MetaPosition(
            "Tier 1",
            "Meta-defining archetype",
            'Blue/White "Unicorn Blocker" control is currently dominating tournaments. '
            "Strong defensive tools and card advantage make this a top-tier competitive choice.",
        ),
    ),
    (
        ("Red", "Green"),
        MetaPosition(
            "Tier 1.5",
            "Strong aggressive contender",
            'Red/Green "Neo Zeon Rush" decks are performing well in the early meta. Fast '
            "pressure with resource acceleration can steal wins before opponents stabilize.",
        ),
    ),
    (
        ("Blue", "Green"),
        MetaPosition(
            "Tier 2",
            "Combo potential archetype",
            "Blue/Green builds offer strong combo potential with Wing Gundam and other "
            "high-impact plays. Requires skilled piloting but can achieve explosive turns.",
        ),
    ),
    (
        ("White", "Red"),
        MetaPosition(
            "Tier 2",
            "Balanced midrange option",
            'White/Red "SEED" decks provide solid all-around gameplay. Good foundation for '
            "competitive play with proper tuning and meta adaptation.",
        ),
    ),
    (
        ("Purple", "Red"),
        MetaPosition(
            "Tier 1.5",
            "Emerging Iron-Blooded archetype",
            'Purple/Red "Iron-Blooded Orphans" decks bring brutal efficiency and berserker '
            "tactics. The Alaya-Vijnana system enables devastating late-game comebacks when "
            "units are damaged.",
        ),
    ),
    (
        ("Purple", "Green"),
        MetaPosition(
            "Tier 2",
            "Tekkadan resource control",
            "Purple/Green builds focus on efficient resource management and calculated "
            "aggression. Tekkadan's survival instincts translate to strong mid-game positioning.",
        ),
    ),
)

# Pairings with an established meta read; anything else is experimental
_ESTABLISHED_PAIRS = (("Blue", "White"), ("Red", "Green"), ("Blue", "Green"), ("White", "Red"))

_EXPERIMENTAL = MetaPosition(
    "Experimental",
    "Unexplored archetype",
    "Your color combination represents an innovative approach. With proper tuning, "
    "experimental builds can surprise the meta and achieve strong results.",
)


def meta_positions(profile: DeckProfile) -> list[MetaPosition]:
    """Meta blurbs for every known pairing in the deck."""
    positions = [position for pair, position in _META_POSITIONS if profile.has(*pair)]
    if not any(profile.has(*pair) for pair in _ESTABLISHED_PAIRS):
        positions.append(_EXPERIMENTAL)
    return positions


def verdict_for(score: float) -> str:
    if score >= 8:
        return "Excellent deck construction with strong strategic focus."
    if score >= 6:
        return "Solid deck with good balance and competitive potential."
    if score >= 4:
        return "Decent foundation but needs refinement for optimal performance."
    return "Significant improvements needed for competitive viability."


def _collect(rules: Sequence[Rule], profile: DeckProfile) -> list[str]:
    lines: list[str] = []
    for rule in rules:
        if rule.applies(profile):
            lines.extend(rule.render(profile))
    return lines


def score_deck(entries: Sequence[DeckEntry]) -> ScoreReport:
    """
    Score a deck and explain the score.

    Never raises; an empty deck produces a report with every count at 0.

    Args:
        entries: Deck entries

    Returns:
        ScoreReport with score, archetype and rule-generated text
    """
    composition = aggregate(entries)
    if composition.total_cards == 0:
        logger.debug("Scoring an empty deck")

    profile = build_profile(entries, composition)
    archetype, confidence = infer_archetype(profile)
    score = compute_score(profile)

    return ScoreReport(
        score=score,
        archetype=archetype,
        confidence=confidence,
        verdict=verdict_for(score),
        composition=composition,
        strengths=_collect(STRENGTH_RULES, profile),
        weaknesses=_collect(WEAKNESS_RULES, profile),
        suggestions=_collect(SUGGESTION_RULES, profile),
        recommendations=_collect(RECOMMENDATION_RULES, profile),
        matchups=matchup_odds(archetype),
        meta_positions=meta_positions(profile),
    )

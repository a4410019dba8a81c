from collections.abc import Callable

from gundeck.analysis.legality import TOURNAMENT_RULES, check_legality, evaluate_legality
from gundeck.models import Card, DeckEntry

CardFactory = Callable[..., Card]


def _by_id(entries: list[DeckEntry]) -> dict[str, tuple[bool, str, str | None]]:
    return {r.rule_id: (r.passed, r.message, r.details) for r in check_legality(entries)}


class TestRuleOrder:
    def test_rule_ids_in_order(self) -> None:
        assert [rule.id for rule in TOURNAMENT_RULES] == [
            "deck-size",
            "card-limit",
            "color-limit",
            "banned-cards",
            "color-requirements",
        ]

    def test_results_follow_rule_order(self) -> None:
        assert [r.rule for r in check_legality([])] == [
            "Deck Size",
            "Card Copies",
            "Color Limit",
            "Banned Cards",
            "Color Balance",
        ]


class TestLegalDeck:
    def test_exactly_fifty_passes_everything(self, legal_deck: list[DeckEntry]) -> None:
        report = evaluate_legality(legal_deck)

        assert report.is_legal
        assert report.violations == []
        assert report.results[0].message == "Valid deck size"

    def test_forty_nine_fails_only_size(
        self, legal_deck: list[DeckEntry], make_card: CardFactory
    ) -> None:
        short = legal_deck[:-1] + [DeckEntry(make_card("Dual Unit", colors=("Red", "Blue")), 1)]

        report = evaluate_legality(short)

        assert [v.rule_id for v in report.violations] == ["deck-size"]
        assert report.violations[0].message == "Invalid deck size: 49/50 cards"
        assert report.violations[0].details == "Add more cards to reach 50"

    def test_fifty_one_fails_only_size(
        self, legal_deck: list[DeckEntry], make_card: CardFactory
    ) -> None:
        long = legal_deck + [DeckEntry(make_card("Extra", colors=("Red",)), 1)]

        report = evaluate_legality(long)

        assert [v.rule_id for v in report.violations] == ["deck-size"]
        assert report.violations[0].details == "Remove cards to reach exactly 50"


class TestIndividualRules:
    def test_copy_limit(self, make_card: CardFactory) -> None:
        results = _by_id(
            [
                DeckEntry(make_card("Zaku II"), 5),
                DeckEntry(make_card("Gouf"), 4),
                DeckEntry(make_card("Dom"), 6),
            ]
        )

        assert results["card-limit"] == (
            False,
            "2 cards exceed limit",
            "Reduce copies of: Zaku II, Dom",
        )

    def test_three_colors_fail_limit_but_pass_balance(self, make_card: CardFactory) -> None:
        results = _by_id(
            [
                DeckEntry(make_card("A", colors=("Red",))),
                DeckEntry(make_card("B", colors=("Blue", "Green"))),
            ]
        )

        assert results["color-limit"] == (
            False,
            "Too many colors: 3/2 maximum",
            "Reduce to maximum 2 colors. Current colors: Red, Blue, Green",
        )
        assert results["color-requirements"][0] is True

    def test_four_colors_fail_both_color_rules(self, make_card: CardFactory) -> None:
        rainbow = make_card("Rainbow", colors=("Red", "Blue", "Green", "White"))

        results = _by_id([DeckEntry(rainbow)])

        assert results["color-limit"][0] is False
        assert results["color-requirements"] == (
            False,
            "Too many colors may cause consistency issues",
            "Consider focusing on fewer colors for better consistency",
        )

    def test_banned_cards(self, make_card: CardFactory) -> None:
        results = _by_id(
            [
                DeckEntry(make_card("Overpowered Card")),
                DeckEntry(make_card("Zaku II")),
                DeckEntry(make_card("Broken Combo Piece")),
            ]
        )

        assert results["banned-cards"] == (
            False,
            "2 banned cards found",
            "Remove: Overpowered Card, Broken Combo Piece",
        )

    def test_rich_card_affinity_is_not_a_color(self, make_rich_card: CardFactory) -> None:
        entries = [
            DeckEntry(make_rich_card(f"Unit {i}", affinity=f"Faction {i}")) for i in range(4)
        ]

        assert _by_id(entries)["color-limit"][0] is True

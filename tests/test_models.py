from gundeck.models import Card, CardKind, Deck, DeckEntry


class TestCard:
    def test_defaults_to_simple(self) -> None:
        card = Card(id="GD01-001", name="RX-78-2 Gundam")

        assert card.kind is CardKind.SIMPLE
        assert card.is_simple
        assert not card.is_rich
        assert card.colors == ()

    def test_rich_card(self) -> None:
        card = Card(id="ST01-005", name="Strike Gundam", kind=CardKind.RICH, ap="3000")

        assert card.is_rich
        assert not card.is_simple

    def test_entry_exposes_card_name(self) -> None:
        entry = DeckEntry(card=Card(id="a", name="Zaku II"), quantity=3)

        assert entry.name == "Zaku II"
        assert entry.quantity == 3


class TestDeck:
    def _deck(self) -> Deck:
        return Deck(
            id="d1",
            name="Red/Blue",
            entries=[
                DeckEntry(Card(id="a", name="A", colors=("Red",), market_price=1.5), 4),
                DeckEntry(Card(id="b", name="B", colors=("Blue", "Red")), 2),
                DeckEntry(Card(id="c", name="C", colors=("White",), market_price=0.5), 1),
            ],
        )

    def test_total_cards(self) -> None:
        assert self._deck().total_cards() == 7

    def test_colors_first_seen_order(self) -> None:
        assert self._deck().colors() == ["Red", "Blue", "White"]

    def test_market_value_treats_unpriced_as_zero(self) -> None:
        assert self._deck().market_value() == 6.5

    def test_win_rate(self) -> None:
        deck = self._deck()
        assert deck.win_rate() == 0.0

        deck.wins = 3
        deck.losses = 1
        assert deck.win_rate() == 0.75

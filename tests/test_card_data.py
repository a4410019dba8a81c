import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from gundeck.models import Card, CardKind, Deck, DeckEntry, DeckVersion, GameRecord, GameResult
from gundeck.parsers import (
    card_to_dict,
    deck_from_dict,
    deck_to_dict,
    detect_kind,
    entries_from_dicts,
    is_present,
    load_cards,
    parse_card,
    parse_stat,
)


class TestParseStat:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("3000", 3000),
            ("12abc", 12),
            (" 7", 7),
            (5, 5),
            (2.9, 2),
            ("-", None),
            ("", None),
            (None, None),
            ("abc", None),
            (True, None),
        ],
    )
    def test_parse(self, value: object, expected: int | None) -> None:
        assert parse_stat(value) == expected


class TestIsPresent:
    def test_sentinel_and_empty_are_absent(self) -> None:
        assert not is_present("-")
        assert not is_present("")
        assert not is_present(None)
        assert is_present("Zeon")


class TestDetectKind:
    def test_explicit_kind_wins(self) -> None:
        assert detect_kind({"kind": "simple", "tcgId": "X"}) is CardKind.SIMPLE

    def test_tcg_id_is_rich(self) -> None:
        assert detect_kind({"tcgId": "ST01-001", "name": "x"}) is CardKind.RICH

    def test_string_stats_are_rich(self) -> None:
        assert detect_kind({"name": "x", "bp": "-"}) is CardKind.RICH

    def test_default_is_simple(self) -> None:
        assert detect_kind({"name": "x", "cost": 3, "colors": ["Red"]}) is CardKind.SIMPLE


class TestParseCard:
    def test_simple_record(self) -> None:
        card = parse_card(
            {
                "id": "GD01-002",
                "name": "Zaku II",
                "type": "Unit",
                "rarity": "C",
                "set": "Newtype Rising",
                "colors": ["Red"],
                "cost": 2,
                "abilities": ["Blocker"],
                "flavorText": "Mass produced.",
                "marketPrice": "0.25",
            }
        )

        assert card.kind is CardKind.SIMPLE
        assert card.id == "GD01-002"
        assert card.category == "Unit"
        assert card.set_name == "Newtype Rising"
        assert card.colors == ("Red",)
        assert card.cost == 2
        assert card.abilities == ("Blocker",)
        assert card.description == "Mass produced."
        assert card.market_price == 0.25

    def test_rich_record_flattens_nested_fields(self) -> None:
        card = parse_card(
            {
                "tcgId": "ST01-005",
                "code": "ST01-005",
                "name": "Strike Gundam",
                "type": "UNIT",
                "set": {"name": "Heroic Beginnings"},
                "ap": "3000",
                "bp": "4000",
                "affinity": "Earth Alliance",
                "needEnergy": {"value": "3"},
                "images": {"large": "https://example.com/a.png"},
            }
        )

        assert card.kind is CardKind.RICH
        assert card.id == "ST01-005"
        assert card.set_name == "Heroic Beginnings"
        assert card.energy == "3"
        assert card.image == "https://example.com/a.png"
        assert card.colors == ()
        assert card.cost is None

    def test_partial_record(self) -> None:
        card = parse_card({"name": "Mystery"})

        assert card.id == "Mystery"
        assert card.category is None
        assert card.market_price is None

    def test_fractional_cost_is_kept(self) -> None:
        assert parse_card({"name": "Ball", "cost": 2.5}).cost == 2.5
        assert parse_card({"name": "GM", "cost": 3.0}).cost == 3
        assert parse_card({"name": "Zaku", "cost": "2"}).cost == 2

    def test_serialized_card_reads_back(self) -> None:
        card = Card(
            id="ST01-010",
            name="Kira Yamato",
            kind=CardKind.RICH,
            category="PILOT",
            ap="-",
            bp="-",
            affinity="-",
        )

        assert parse_card(card_to_dict(card)) == card


class TestLoadCards:
    def test_skips_nameless_records(self, tmp_path: Path) -> None:
        path = tmp_path / "cards.json"
        path.write_text(json.dumps([{"name": "Zaku II", "cost": 2}, {"id": "x"}]))

        cards = load_cards(path)

        assert [c.name for c in cards] == ["Zaku II"]


class TestDeckData:
    def test_entries_skip_invalid_records(self) -> None:
        entries = entries_from_dicts(
            [
                {"card": {"name": "Zaku II"}, "quantity": 2},
                {"card": {}, "quantity": 1},
                {"card": {"name": "Gouf"}, "quantity": 0},
            ]
        )

        assert [(e.name, e.quantity) for e in entries] == [("Zaku II", 2)]

    def test_deck_survives_json(self) -> None:
        created = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
        entries = [DeckEntry(Card(id="a", name="A", colors=("Red",), cost=2), 3)]
        deck = Deck(
            id="d1",
            name="Deck",
            entries=entries,
            tags=["aggro"],
            created_at=created,
            updated_at=created,
            wins=1,
            versions=[DeckVersion(id="v1", version=1, name="Initial Version", entries=entries)],
            game_history=[
                GameRecord(id="g1", opponent="Control", result=GameResult.WIN, date=created)
            ],
        )

        restored = deck_from_dict(json.loads(json.dumps(deck_to_dict(deck))))

        assert restored.entries == deck.entries
        assert restored.created_at == created
        assert restored.versions[0].name == "Initial Version"
        assert restored.game_history[0].result is GameResult.WIN
        assert restored.wins == 1

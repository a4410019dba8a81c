from pathlib import Path

from gundeck.models import Card
from gundeck.services.catalog import (
    CardCatalog,
    CardFilters,
    TcgFilters,
    load_catalog,
    matches_filters,
)


class TestLoadCatalog:
    def test_loads_both_record_shapes(self, fixture_catalog: CardCatalog) -> None:
        assert len(fixture_catalog) == 7
        assert fixture_catalog.get("GD01-001") is not None
        assert fixture_catalog.get("ST01-005") is not None

    def test_missing_file_gives_empty_catalog(self, tmp_path: Path) -> None:
        catalog = load_catalog(tmp_path / "missing.json")

        assert len(catalog) == 0
        assert catalog.cards == []

    def test_get_unknown_card(self, fixture_catalog: CardCatalog) -> None:
        assert fixture_catalog.get("nope") is None


class TestDeckBuilderFilters:
    def _names(self, catalog: CardCatalog, filters: CardFilters) -> list[str]:
        return [card.name for card in catalog.filter(filters)]

    def test_empty_filters_match_everything(self, fixture_catalog: CardCatalog) -> None:
        assert len(fixture_catalog.filter(CardFilters())) == 7

    def test_search_matches_name_or_id(self, fixture_catalog: CardCatalog) -> None:
        assert self._names(fixture_catalog, CardFilters(search="zaku")) == ["Zaku II"]
        assert self._names(fixture_catalog, CardFilters(search="gd01-004")) == ["Amuro Ray"]

    def test_colors_match_any(self, fixture_catalog: CardCatalog) -> None:
        names = self._names(fixture_catalog, CardFilters(colors=["White", "Red"]))

        assert names == ["Zaku II", "Sazabi", "Amuro Ray"]

    def test_types_and_sets(self, fixture_catalog: CardCatalog) -> None:
        filters = CardFilters(types=["Unit"], sets=["Newtype Rising"])

        assert self._names(fixture_catalog, filters) == ["RX-78-2 Gundam", "Zaku II"]

    def test_cost_six_means_six_or_more(self, fixture_catalog: CardCatalog) -> None:
        assert self._names(fixture_catalog, CardFilters(cost="6")) == ["Sazabi"]

    def test_exact_cost(self, fixture_catalog: CardCatalog) -> None:
        assert self._names(fixture_catalog, CardFilters(cost="2")) == ["Zaku II"]

    def test_cost_filter_excludes_cards_without_cost(self) -> None:
        card = Card(id="x", name="No Cost")

        assert not matches_filters(card, CardFilters(cost="1"))


class TestTcgFilters:
    def _names(self, catalog: CardCatalog, filters: TcgFilters) -> list[str]:
        return [card.name for card in catalog.search(filters)]

    def test_query_searches_effect_text(self, fixture_catalog: CardCatalog) -> None:
        assert self._names(fixture_catalog, TcgFilters(query="draw 1")) == ["Strike Gundam"]

    def test_query_searches_code(self, fixture_catalog: CardCatalog) -> None:
        assert self._names(fixture_catalog, TcgFilters(query="st02")) == ["Wing Gundam"]

    def test_exact_type_and_set(self, fixture_catalog: CardCatalog) -> None:
        filters = TcgFilters(type="UNIT", set_name="Heroic Beginnings")

        assert self._names(fixture_catalog, filters) == ["Strike Gundam"]

    def test_bp_range_excludes_missing_bp(self, fixture_catalog: CardCatalog) -> None:
        assert self._names(fixture_catalog, TcgFilters(min_bp=0)) == [
            "Strike Gundam",
            "Wing Gundam",
        ]

    def test_bp_bounds(self, fixture_catalog: CardCatalog) -> None:
        assert self._names(fixture_catalog, TcgFilters(min_bp=5000)) == ["Wing Gundam"]
        assert self._names(fixture_catalog, TcgFilters(max_bp=4000)) == ["Strike Gundam"]


class TestAvailableValues:
    def test_flattens_and_sorts(self, fixture_catalog: CardCatalog) -> None:
        assert fixture_catalog.available_values("colors") == ["Blue", "Red", "White"]

    def test_skips_missing_values(self, fixture_catalog: CardCatalog) -> None:
        assert fixture_catalog.available_values("affinity") == [
            "Earth Alliance",
            "Operation Meteor",
        ]

    def test_skips_missing_values_inside_tuples(self) -> None:
        catalog = CardCatalog(
            [
                Card(id="a", name="A", colors=("Red", "", "-")),
                Card(id="b", name="B", colors=("Blue",), abilities=("-", "Repair 1")),
            ]
        )

        assert catalog.available_values("colors") == ["Blue", "Red"]
        assert catalog.available_values("abilities") == ["Repair 1"]

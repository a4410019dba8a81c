"""Tests for card catalog endpoints."""

from httpx import AsyncClient


class TestListCards:
    async def test_lists_all(self, client: AsyncClient) -> None:
        response = await client.get("/cards")

        assert response.status_code == 200
        assert response.json()["count"] == 7

    async def test_library_filters(self, client: AsyncClient) -> None:
        response = await client.get("/cards", params={"type": "UNIT", "min_bp": 5000})

        data = response.json()
        assert data["count"] == 1
        assert data["cards"][0]["name"] == "Wing Gundam"
        assert data["cards"][0]["kind"] == "rich"

    async def test_negative_bp_rejected(self, client: AsyncClient) -> None:
        response = await client.get("/cards", params={"min_bp": -1})

        assert response.status_code == 422


class TestFilterCards:
    async def test_deck_builder_filters(self, client: AsyncClient) -> None:
        response = await client.post("/cards/filter", json={"colors": ["Red"], "cost": "6"})

        assert response.status_code == 200
        assert [c["name"] for c in response.json()["cards"]] == ["Sazabi"]


class TestFacets:
    async def test_facets(self, client: AsyncClient) -> None:
        response = await client.get("/cards/facets")

        facets = response.json()["facets"]
        assert facets["colors"] == ["Blue", "Red", "White"]
        assert "Heroic Beginnings" in facets["set_name"]


class TestGetCard:
    async def test_get_card(self, client: AsyncClient) -> None:
        response = await client.get("/cards/GD01-001")

        assert response.status_code == 200
        card = response.json()
        assert card["name"] == "RX-78-2 Gundam"
        assert card["colors"] == ["Blue"]
        assert card["market_price"] == 12.5

    async def test_card_not_found(self, client: AsyncClient) -> None:
        response = await client.get("/cards/nope")

        assert response.status_code == 404

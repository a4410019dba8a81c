import random
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from gundeck.analysis.comparison import ComparisonSimulator
from gundeck.api.analysis import get_simulator
from gundeck.db.database import get_session
from gundeck.main import app
from gundeck.models.card import Card, CardKind, DeckEntry
from gundeck.models.db import Base
from gundeck.services.catalog import CardCatalog, get_catalog, load_catalog

FIXTURES = Path(__file__).parent / "fixtures"

CardFactory = Callable[..., Card]


def _slug(name: str) -> str:
    return name.lower().replace(" ", "-")


@pytest.fixture
def make_card() -> CardFactory:
    """Factory for simple cards (numeric cost, list of colors)."""

    def _make(
        name: str,
        category: str = "Unit",
        cost: float | None = 2,
        colors: tuple[str, ...] = ("Red",),
        **kwargs: Any,
    ) -> Card:
        card_id = kwargs.pop("id", _slug(name))
        return Card(
            id=card_id,
            name=name,
            kind=CardKind.SIMPLE,
            category=category,
            cost=cost,
            colors=tuple(colors),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_rich_card() -> CardFactory:
    """Factory for rich cards (string AP/BP, affinity, energy)."""

    def _make(
        name: str,
        category: str = "UNIT",
        ap: str | None = "2000",
        bp: str | None = "3000",
        affinity: str | None = "Earth Federation",
        energy: str | None = "2",
        **kwargs: Any,
    ) -> Card:
        card_id = kwargs.pop("id", f"tcg-{_slug(name)}")
        return Card(
            id=card_id,
            name=name,
            kind=CardKind.RICH,
            category=category,
            ap=ap,
            bp=bp,
            affinity=affinity,
            energy=energy,
            **kwargs,
        )

    return _make


@pytest.fixture
def aggro_deck(make_card: CardFactory) -> list[DeckEntry]:
    """
    47-card red aggro deck.

    26 Units averaging cost 2.0 (18 at cost 3 or lower), 7 Pilots,
    9 Commands, 5 Bases. Non-unit cards have no cost and no color.
    """
    units = [
        DeckEntry(make_card("Zaku I", cost=1), 4),
        DeckEntry(make_card("Zaku II", cost=1), 4),
        DeckEntry(make_card("Gouf", cost=1), 4),
        DeckEntry(make_card("Dom", cost=1), 4),
        DeckEntry(make_card("Gelgoog", cost=2), 2),
        DeckEntry(make_card("Sazabi", cost=4), 4),
        DeckEntry(make_card("Nightingale", cost=4), 4),
    ]
    support = [
        DeckEntry(make_card("Char Aznable", "Pilot", None, ()), 4),
        DeckEntry(make_card("Ramba Ral", "Pilot", None, ()), 3),
        DeckEntry(make_card("Solar Ray", "Command", None, ()), 4),
        DeckEntry(make_card("Colony Drop", "Command", None, ()), 4),
        DeckEntry(make_card("Sortie", "Command", None, ()), 1),
        DeckEntry(make_card("Axis", "Base", None, ()), 4),
        DeckEntry(make_card("Solomon", "Base", None, ()), 1),
    ]
    return units + support


@pytest.fixture
def legal_deck(make_card: CardFactory) -> list[DeckEntry]:
    """Exactly 50 cards, 4 copies max, two colors, nothing banned."""
    entries = [
        DeckEntry(make_card(f"Red Unit {i}", cost=2, colors=("Red",)), 4) for i in range(6)
    ]
    entries += [
        DeckEntry(make_card(f"Blue Unit {i}", cost=3, colors=("Blue",)), 4) for i in range(6)
    ]
    entries.append(DeckEntry(make_card("Dual Unit", cost=4, colors=("Red", "Blue")), 2))
    return entries


@pytest.fixture
def fixture_catalog() -> CardCatalog:
    """Catalog loaded from tests/fixtures/cards.json."""
    return load_catalog(FIXTURES / "cards.json")


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """A session on the in-memory database."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
async def client(
    async_engine: AsyncEngine, fixture_catalog: CardCatalog
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async test client.

    The database is in-memory SQLite, the catalog comes from the fixture
    file and comparisons resolve immediately with a seeded random source.
    """
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_catalog] = lambda: fixture_catalog
    app.dependency_overrides[get_simulator] = lambda: ComparisonSimulator(
        latency=0, rng=random.Random(7)
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()

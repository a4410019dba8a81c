"""
Database CRUD operations.

Async functions for creating, reading and deleting stored decks, their
versions and their game records.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gundeck.models.card import DeckEntry
from gundeck.models.db import DeckDB, DeckVersionDB, GameRecordDB
from gundeck.models.deck import Deck, DeckVersion, GameRecord, GameResult
from gundeck.parsers.deck_data import entries_from_dicts, entries_to_dicts


def _new_id() -> str:
    return uuid.uuid4().hex


def _snapshot_totals(entries: list[DeckEntry]) -> tuple[int, float]:
    total = sum(entry.quantity for entry in entries)
    value = sum((entry.card.market_price or 0.0) * entry.quantity for entry in entries)
    return total, value


# --- Deck Operations ---


async def get_deck(session: AsyncSession, deck_id: str) -> DeckDB | None:
    """
    Get a deck by id with its versions and games loaded.

    Returns None if no such deck exists.
    """
    result = await session.execute(
        select(DeckDB)
        .where(DeckDB.id == deck_id)
        .options(selectinload(DeckDB.versions), selectinload(DeckDB.games))
    )
    return result.scalar_one_or_none()


async def list_decks(
    session: AsyncSession,
    author: str | None = None,
    public_only: bool = False,
    limit: int = 100,
) -> list[DeckDB]:
    """List decks, newest first, optionally restricted to an author or to public decks."""
    query = select(DeckDB).options(selectinload(DeckDB.versions), selectinload(DeckDB.games))
    if author is not None:
        query = query.where(DeckDB.author == author)
    if public_only:
        query = query.where(DeckDB.is_public.is_(True))

    result = await session.execute(query.order_by(DeckDB.created_at.desc()).limit(limit))
    return list(result.scalars().all())


async def create_deck(
    session: AsyncSession,
    name: str,
    entries: list[DeckEntry],
    author: str | None = None,
    description: str | None = None,
    notes: str | None = None,
    tags: list[str] | None = None,
    is_public: bool = False,
) -> DeckDB:
    """
    Create a deck with an initial version.

    The first version is named "Initial Version" and holds the same card
    list as the deck.
    """
    serialized = entries_to_dicts(entries)
    total, value = _snapshot_totals(entries)

    deck_id = _new_id()
    deck = DeckDB(
        id=deck_id,
        name=name,
        description=description,
        notes=notes,
        author=author,
        is_public=is_public,
        tags=list(tags or []),
        entries=serialized,
        wins=0,
        losses=0,
        liked_by=[],
        versions=[
            DeckVersionDB(
                id=f"v1-{deck_id}",
                version=1,
                name="Initial Version",
                entries=serialized,
                notes="Initial deck creation",
                total_cards=total,
                market_value=value,
            )
        ],
        games=[],
    )
    session.add(deck)
    await session.flush()
    return deck


async def add_deck_version(
    session: AsyncSession,
    deck: DeckDB,
    entries: list[DeckEntry],
    notes: str | None = None,
) -> DeckVersionDB:
    """
    Append a version and make its card list the deck's current one.

    The deck must have been loaded with its versions (see get_deck).
    """
    number = len(deck.versions) + 1
    total, value = _snapshot_totals(entries)
    serialized = entries_to_dicts(entries)

    version = DeckVersionDB(
        id=f"v{number}-{_new_id()}",
        version=number,
        name=f"Version {number}",
        entries=serialized,
        notes=notes or "Updated deck",
        total_cards=total,
        market_value=value,
    )
    deck.versions.append(version)
    deck.entries = serialized
    await session.flush()
    return version


async def add_game_record(session: AsyncSession, deck: DeckDB, record: GameRecord) -> GameRecordDB:
    """Record a game and bump the deck's win or loss count."""
    game = GameRecordDB(
        id=record.id,
        opponent=record.opponent,
        result=record.result.value,
        format=record.format,
        notes=record.notes,
        played_at=record.date,
    )
    deck.games.append(game)

    if record.result is GameResult.WIN:
        deck.wins += 1
    elif record.result is GameResult.LOSS:
        deck.losses += 1

    await session.flush()
    return game


async def update_deck(
    session: AsyncSession,
    deck: DeckDB,
    name: str | None = None,
    description: str | None = None,
    notes: str | None = None,
    tags: list[str] | None = None,
    is_public: bool | None = None,
) -> DeckDB:
    """Update deck metadata. Fields left as None are unchanged."""
    if name is not None:
        deck.name = name
    if description is not None:
        deck.description = description
    if notes is not None:
        deck.notes = notes
    if tags is not None:
        deck.tags = list(tags)
    if is_public is not None:
        deck.is_public = is_public

    await session.flush()
    return deck


async def toggle_deck_like(session: AsyncSession, deck: DeckDB, user: str) -> bool:
    """
    Like or unlike a deck on behalf of a user.

    Returns True if the user now likes the deck.
    """
    liked_by = list(deck.liked_by or [])
    if user in liked_by:
        liked_by.remove(user)
        liked = False
    else:
        liked_by.append(user)
        liked = True

    # JSON columns only see reassignment, not in-place mutation
    deck.liked_by = liked_by
    await session.flush()
    return liked


async def delete_deck(session: AsyncSession, deck_id: str) -> bool:
    """
    Delete a deck with its versions and games.

    Returns True if deleted, False if not found.
    """
    deck = await get_deck(session, deck_id)
    if not deck:
        return False

    await session.delete(deck)
    return True


# --- Conversion ---


def version_to_model(version: DeckVersionDB) -> DeckVersion:
    return DeckVersion(
        id=version.id,
        version=version.version,
        name=version.name,
        entries=entries_from_dicts(version.entries),
        created_at=version.created_at,
        notes=version.notes,
        total_cards=version.total_cards,
        market_value=version.market_value,
    )


def game_to_model(game: GameRecordDB) -> GameRecord:
    return GameRecord(
        id=game.id,
        opponent=game.opponent,
        result=GameResult(game.result),
        date=game.played_at,
        format=game.format,
        notes=game.notes,
    )


def deck_to_model(deck: DeckDB) -> Deck:
    """Convert a database deck (loaded with versions and games) to a domain model."""
    return Deck(
        id=deck.id,
        name=deck.name,
        entries=entries_from_dicts(deck.entries),
        description=deck.description,
        notes=deck.notes,
        is_public=deck.is_public,
        author=deck.author,
        tags=list(deck.tags or []),
        created_at=deck.created_at,
        updated_at=deck.updated_at,
        wins=deck.wins,
        losses=deck.losses,
        versions=[version_to_model(v) for v in deck.versions],
        game_history=[game_to_model(g) for g in deck.games],
        likes=len(deck.liked_by or []),
        allow_comments=deck.allow_comments,
        allow_forks=deck.allow_forks,
    )

"""
Deck serialization.

Decks are stored as plain JSON: entries carry the full card record so a
saved deck can be analyzed without the catalog that built it.
"""

from datetime import datetime
from typing import Any

from gundeck.models.card import DeckEntry
from gundeck.models.deck import Deck, DeckVersion, GameRecord, GameResult
from gundeck.parsers.card_data import card_to_dict, parse_card


def entries_to_dicts(entries: list[DeckEntry]) -> list[dict[str, Any]]:
    return [{"card": card_to_dict(entry.card), "quantity": entry.quantity} for entry in entries]


def entries_from_dicts(records: list[dict[str, Any]]) -> list[DeckEntry]:
    """Parse entries, skipping records without a card name or a positive quantity."""
    entries = []
    for record in records:
        card = record.get("card") or {}
        quantity = int(record.get("quantity", 1))
        if not card.get("name") or quantity <= 0:
            continue
        entries.append(DeckEntry(card=parse_card(card), quantity=quantity))
    return entries


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def version_to_dict(version: DeckVersion) -> dict[str, Any]:
    return {
        "id": version.id,
        "version": version.version,
        "name": version.name,
        "entries": entries_to_dicts(version.entries),
        "created_at": version.created_at.isoformat(),
        "notes": version.notes,
        "total_cards": version.total_cards,
        "market_value": version.market_value,
    }


def version_from_dict(raw: dict[str, Any]) -> DeckVersion:
    version = DeckVersion(
        id=raw["id"],
        version=int(raw["version"]),
        name=raw.get("name", ""),
        entries=entries_from_dicts(raw.get("entries", [])),
        notes=raw.get("notes"),
        total_cards=int(raw.get("total_cards", 0)),
        market_value=float(raw.get("market_value", 0.0)),
    )
    created_at = _parse_datetime(raw.get("created_at"))
    if created_at is not None:
        version.created_at = created_at
    return version


def game_to_dict(game: GameRecord) -> dict[str, Any]:
    return {
        "id": game.id,
        "opponent": game.opponent,
        "result": game.result.value,
        "date": game.date.isoformat(),
        "format": game.format,
        "notes": game.notes,
    }


def game_from_dict(raw: dict[str, Any]) -> GameRecord:
    game = GameRecord(
        id=raw["id"],
        opponent=raw.get("opponent", ""),
        result=GameResult(raw["result"]),
        format=raw.get("format", "Standard"),
        notes=raw.get("notes"),
    )
    played = _parse_datetime(raw.get("date"))
    if played is not None:
        game.date = played
    return game


def deck_to_dict(deck: Deck) -> dict[str, Any]:
    """Serialize a deck, its versions and its game history."""
    return {
        "id": deck.id,
        "name": deck.name,
        "entries": entries_to_dicts(deck.entries),
        "description": deck.description,
        "notes": deck.notes,
        "is_public": deck.is_public,
        "author": deck.author,
        "tags": list(deck.tags),
        "created_at": deck.created_at.isoformat(),
        "updated_at": deck.updated_at.isoformat(),
        "wins": deck.wins,
        "losses": deck.losses,
        "versions": [version_to_dict(v) for v in deck.versions],
        "game_history": [game_to_dict(g) for g in deck.game_history],
        "likes": deck.likes,
        "allow_comments": deck.allow_comments,
        "allow_forks": deck.allow_forks,
    }


def deck_from_dict(raw: dict[str, Any]) -> Deck:
    """Inverse of deck_to_dict. Missing optional fields take their defaults."""
    deck = Deck(
        id=raw["id"],
        name=raw["name"],
        entries=entries_from_dicts(raw.get("entries", [])),
        description=raw.get("description"),
        notes=raw.get("notes"),
        is_public=bool(raw.get("is_public", False)),
        author=raw.get("author"),
        tags=list(raw.get("tags", [])),
        wins=int(raw.get("wins", 0)),
        losses=int(raw.get("losses", 0)),
        versions=[version_from_dict(v) for v in raw.get("versions", [])],
        game_history=[game_from_dict(g) for g in raw.get("game_history", [])],
        likes=int(raw.get("likes", 0)),
        allow_comments=bool(raw.get("allow_comments", True)),
        allow_forks=bool(raw.get("allow_forks", True)),
    )
    created_at = _parse_datetime(raw.get("created_at"))
    if created_at is not None:
        deck.created_at = created_at
    updated_at = _parse_datetime(raw.get("updated_at"))
    if updated_at is not None:
        deck.updated_at = updated_at
    return deck

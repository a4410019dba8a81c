"""
Deck API endpoints.

Stores decks with their version history and game records, and serves a
combined analysis of a stored deck.
"""

import uuid
from dataclasses import asdict
from datetime import datetime
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from gundeck.analysis import aggregate, evaluate_legality, score_deck, summarize_records
from gundeck.api.schemas import (
    CompositionResponse,
    EntryPayload,
    EntryResponse,
    LegalityResponse,
    LegalityResultResponse,
    RecordSummaryResponse,
    ScoreResponse,
    entries_from_payload,
    entry_responses,
)
from gundeck.db import (
    add_deck_version,
    add_game_record,
    create_deck,
    deck_to_model,
    delete_deck,
    get_deck,
    list_decks,
    toggle_deck_like,
    update_deck,
)
from gundeck.db.database import get_session
from gundeck.models.deck import Deck, GameRecord, GameResult
from gundeck.models.db import DeckDB

router = APIRouter(prefix="/decks", tags=["decks"])


class DeckCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    author: str | None = None
    description: str | None = None
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_public: bool = False
    entries: list[EntryPayload] = Field(default_factory=list)


class DeckUpdateRequest(BaseModel):
    """Metadata changes. Omitted fields are left as they are."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    notes: str | None = None
    tags: list[str] | None = None
    is_public: bool | None = None


class LikeRequest(BaseModel):
    user: str = Field(min_length=1)


class LikeResponse(BaseModel):
    likes: int
    is_liked: bool


class VersionCreateRequest(BaseModel):
    entries: list[EntryPayload]
    notes: str | None = None


class GameRecordRequest(BaseModel):
    opponent: str = Field(min_length=1)
    result: Literal["win", "loss", "draw"]
    format: str = "Standard"
    notes: str | None = None
    date: datetime | None = None


class VersionResponse(BaseModel):
    id: str
    version: int
    name: str
    notes: str | None = None
    total_cards: int
    market_value: float
    created_at: datetime


class GameRecordResponse(BaseModel):
    id: str
    opponent: str
    result: str
    format: str
    notes: str | None = None
    date: datetime


class DeckResponse(BaseModel):
    """Response model for a single stored deck."""

    id: str
    name: str
    description: str | None = None
    notes: str | None = None
    author: str | None = None
    is_public: bool
    tags: list[str]
    entries: list[EntryResponse]
    total_cards: int
    colors: list[str]
    market_value: float
    wins: int
    losses: int
    win_rate: float
    likes: int
    created_at: datetime
    updated_at: datetime
    versions: list[VersionResponse]
    game_history: list[GameRecordResponse]


class DeckListResponse(BaseModel):
    decks: list[DeckResponse]
    count: int


class DeckAnalysisResponse(BaseModel):
    """Everything the deck page shows about a stored deck."""

    deck_id: str
    name: str
    composition: CompositionResponse
    score: ScoreResponse
    legality: LegalityResponse
    record: RecordSummaryResponse


def deck_response(deck: Deck) -> DeckResponse:
    return DeckResponse(
        id=deck.id,
        name=deck.name,
        description=deck.description,
        notes=deck.notes,
        author=deck.author,
        is_public=deck.is_public,
        tags=deck.tags,
        entries=entry_responses(deck.entries),
        total_cards=deck.total_cards(),
        colors=deck.colors(),
        market_value=deck.market_value(),
        wins=deck.wins,
        losses=deck.losses,
        win_rate=deck.win_rate(),
        likes=deck.likes,
        created_at=deck.created_at,
        updated_at=deck.updated_at,
        versions=[
            VersionResponse(
                id=v.id,
                version=v.version,
                name=v.name,
                notes=v.notes,
                total_cards=v.total_cards,
                market_value=v.market_value,
                created_at=v.created_at,
            )
            for v in deck.versions
        ],
        game_history=[
            GameRecordResponse(
                id=g.id,
                opponent=g.opponent,
                result=g.result.value,
                format=g.format,
                notes=g.notes,
                date=g.date,
            )
            for g in deck.game_history
        ],
    )


async def _require_deck(session: AsyncSession, deck_id: str) -> DeckDB:
    db_deck = await get_deck(session, deck_id)
    if not db_deck:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deck not found: {deck_id}",
        )
    return db_deck


@router.post("", response_model=DeckResponse, status_code=status.HTTP_201_CREATED)
async def create_deck_endpoint(
    request: DeckCreateRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckResponse:
    """Store a new deck. Its card list becomes version 1."""
    db_deck = await create_deck(
        session,
        name=request.name,
        entries=entries_from_payload(request.entries),
        author=request.author,
        description=request.description,
        notes=request.notes,
        tags=request.tags,
        is_public=request.is_public,
    )
    return deck_response(deck_to_model(db_deck))


@router.get("", response_model=DeckListResponse)
async def list_decks_endpoint(
    session: Annotated[AsyncSession, Depends(get_session)],
    author: str | None = None,
    public_only: bool = False,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> DeckListResponse:
    """List stored decks, newest first."""
    db_decks = await list_decks(session, author=author, public_only=public_only, limit=limit)
    decks = [deck_response(deck_to_model(d)) for d in db_decks]
    return DeckListResponse(decks=decks, count=len(decks))


@router.get("/{deck_id}", response_model=DeckResponse)
async def get_deck_endpoint(
    deck_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckResponse:
    """
    Get a stored deck.

    Returns 404 if the deck does not exist.
    """
    db_deck = await _require_deck(session, deck_id)
    return deck_response(deck_to_model(db_deck))


@router.put("/{deck_id}", response_model=DeckResponse)
async def update_deck_endpoint(
    deck_id: str,
    request: DeckUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckResponse:
    """
    Update a deck's name, description, notes, tags or visibility.

    Returns 404 if the deck does not exist.
    """
    db_deck = await _require_deck(session, deck_id)
    await update_deck(
        session,
        db_deck,
        name=request.name,
        description=request.description,
        notes=request.notes,
        tags=request.tags,
        is_public=request.is_public,
    )
    return deck_response(deck_to_model(db_deck))


@router.post("/{deck_id}/like", response_model=LikeResponse)
async def like_deck_endpoint(
    deck_id: str,
    request: LikeRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> LikeResponse:
    """Like a deck, or unlike it if the user already does."""
    db_deck = await _require_deck(session, deck_id)
    liked = await toggle_deck_like(session, db_deck, request.user)
    return LikeResponse(likes=len(db_deck.liked_by), is_liked=liked)


@router.delete("/{deck_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_deck_endpoint(
    deck_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> None:
    """Delete a stored deck with its versions and games."""
    deleted = await delete_deck(session, deck_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deck not found: {deck_id}",
        )


@router.post("/{deck_id}/versions", response_model=DeckResponse)
async def create_version_endpoint(
    deck_id: str,
    request: VersionCreateRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckResponse:
    """Save a new version; its card list becomes the deck's current one."""
    db_deck = await _require_deck(session, deck_id)
    await add_deck_version(
        session, db_deck, entries_from_payload(request.entries), notes=request.notes
    )
    return deck_response(deck_to_model(db_deck))


@router.post("/{deck_id}/games", response_model=DeckResponse)
async def record_game_endpoint(
    deck_id: str,
    request: GameRecordRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckResponse:
    """Record a game played with a deck. Wins and losses update the deck's tally."""
    db_deck = await _require_deck(session, deck_id)

    record = GameRecord(
        id=uuid.uuid4().hex,
        opponent=request.opponent,
        result=GameResult(request.result),
        format=request.format,
        notes=request.notes,
    )
    if request.date is not None:
        record.date = request.date

    await add_game_record(session, db_deck, record)
    return deck_response(deck_to_model(db_deck))


@router.get("/{deck_id}/analysis", response_model=DeckAnalysisResponse)
async def analyze_deck_endpoint(
    deck_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckAnalysisResponse:
    """Composition, score, tournament legality and game record of a stored deck."""
    deck = deck_to_model(await _require_deck(session, deck_id))

    report = score_deck(deck.entries)
    legality = evaluate_legality(deck.entries)

    return DeckAnalysisResponse(
        deck_id=deck.id,
        name=deck.name,
        composition=CompositionResponse.model_validate(asdict(aggregate(deck.entries))),
        score=ScoreResponse.model_validate(asdict(report)),
        legality=LegalityResponse(
            is_legal=legality.is_legal,
            results=[LegalityResultResponse.model_validate(asdict(r)) for r in legality.results],
        ),
        record=RecordSummaryResponse.model_validate(asdict(summarize_records(deck.game_history))),
    )

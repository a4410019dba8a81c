"""
Deck analysis endpoints.

Stateless analysis of card lists sent inline, plus the simulated
comparison of two stored decks.
"""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from gundeck.analysis import (
    ComparisonSimulator,
    aggregate,
    card_statistics,
    evaluate_legality,
    score_deck,
)
from gundeck.api.schemas import (
    CardStatisticsResponse,
    ComparisonResponse,
    CompositionResponse,
    EntryPayload,
    LegalityResponse,
    LegalityResultResponse,
    ScoreResponse,
    entries_from_payload,
)
from gundeck.db import deck_to_model, get_deck
from gundeck.db.database import get_session

router = APIRouter(prefix="/analysis", tags=["analysis"])


class EntriesRequest(BaseModel):
    entries: list[EntryPayload]


class CompareRequest(BaseModel):
    deck1_id: str
    deck2_id: str


def get_simulator() -> ComparisonSimulator:
    """Dependency providing the comparison simulator with configured latency."""
    return ComparisonSimulator()


@router.post("/composition", response_model=CompositionResponse)
async def composition(request: EntriesRequest) -> CompositionResponse:
    """Aggregate counts and averages for a card list."""
    stats = aggregate(entries_from_payload(request.entries))
    return CompositionResponse.model_validate(asdict(stats))


@router.post("/statistics", response_model=CardStatisticsResponse)
async def statistics(request: EntriesRequest) -> CardStatisticsResponse:
    """AP and BP summaries plus category breakdowns for a card list."""
    stats = card_statistics(entries_from_payload(request.entries))
    return CardStatisticsResponse.model_validate(asdict(stats))


@router.post("/score", response_model=ScoreResponse)
async def score(request: EntriesRequest) -> ScoreResponse:
    """Heuristic score, archetype and advice for a card list."""
    report = score_deck(entries_from_payload(request.entries))
    return ScoreResponse.model_validate(asdict(report))


@router.post("/legality", response_model=LegalityResponse)
async def legality(request: EntriesRequest) -> LegalityResponse:
    """Check a card list against the tournament rules."""
    report = evaluate_legality(entries_from_payload(request.entries))
    return LegalityResponse(
        is_legal=report.is_legal,
        results=[LegalityResultResponse.model_validate(asdict(r)) for r in report.results],
    )


@router.post("/compare", response_model=ComparisonResponse)
async def compare(
    request: CompareRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    simulator: Annotated[ComparisonSimulator, Depends(get_simulator)],
) -> ComparisonResponse:
    """
    Compare two stored decks.

    Returns 400 if both ids are the same deck, 404 if either is missing.
    """
    if request.deck1_id == request.deck2_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Select two different decks to compare",
        )

    decks = []
    for deck_id in (request.deck1_id, request.deck2_id):
        db_deck = await get_deck(session, deck_id)
        if not db_deck:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Deck not found: {deck_id}",
            )
        decks.append(deck_to_model(db_deck))

    report = await simulator.compare(decks[0], decks[1])
    return ComparisonResponse.model_validate(asdict(report))

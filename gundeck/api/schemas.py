"""
Request and response models shared across API routers.

Analysis results are plain dataclasses; the response models here mirror
them field for field and are built with ``model_validate(asdict(...))``.
"""

from typing import Any

from fastapi import HTTPException, status
from pydantic import BaseModel, Field

from gundeck.models.card import Card, DeckEntry
from gundeck.parsers.card_data import card_to_dict, parse_card


class EntryPayload(BaseModel):
    """
    A deck entry sent inline with a request.

    The card may be in either card backend record shape.
    """

    card: dict[str, Any]
    quantity: int = Field(default=1, ge=1)


def entries_from_payload(payload: list[EntryPayload]) -> list[DeckEntry]:
    """
    Parse inline entries.

    Raises:
        HTTPException: 422 if a card record has no name
    """
    entries = []
    for i, item in enumerate(payload):
        if not item.card.get("name"):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Entry {i} has a card without a name",
            )
        entries.append(DeckEntry(card=parse_card(item.card), quantity=item.quantity))
    return entries


class CardResponse(BaseModel):
    """A card in its flat serialized form."""

    id: str
    name: str
    kind: str
    category: str | None = None
    rarity: str | None = None
    set_name: str | None = None
    colors: list[str] = Field(default_factory=list)
    cost: int | float | None = None
    power: int | None = None
    hp: int | None = None
    level: int | None = None
    ap: str | None = None
    bp: str | None = None
    affinity: str | None = None
    energy: str | None = None
    code: str | None = None
    abilities: list[str] = Field(default_factory=list)
    effect: str | None = None
    description: str | None = None
    image: str | None = None
    market_price: float | None = None

    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        return cls.model_validate(card_to_dict(card))


class EntryResponse(BaseModel):
    card: CardResponse
    quantity: int


def entry_responses(entries: list[DeckEntry]) -> list[EntryResponse]:
    return [
        EntryResponse(card=CardResponse.from_card(entry.card), quantity=entry.quantity)
        for entry in entries
    ]


class CompositionResponse(BaseModel):
    total_cards: int
    unique_cards: int
    average_cost: str
    type_counts: dict[str, int]
    color_counts: dict[str, int]
    affinity_counts: dict[str, int]
    rarity_counts: dict[str, int]
    energy_requirements: dict[str, int]
    set_counts: dict[str, int]
    total_ap: int
    total_bp: int
    average_bp: str
    completion: float
    simple_cards: int
    rich_cards: int


class NumericSummaryResponse(BaseModel):
    total: int
    average: str
    minimum: int
    maximum: int
    distribution: dict[int, int]


class CardStatisticsResponse(BaseModel):
    total_cards: int
    ap: NumericSummaryResponse
    bp: NumericSummaryResponse
    type_counts: dict[str, int]
    rarity_counts: dict[str, int]
    affinity_counts: dict[str, int]
    energy_requirements: dict[str, int]
    set_counts: dict[str, int]


class MatchupOddsResponse(BaseModel):
    opponent: str
    rating: str
    percentage: int


class MetaPositionResponse(BaseModel):
    tier: str
    headline: str
    summary: str


class ScoreResponse(BaseModel):
    """Heuristic deck evaluation."""

    score: float
    archetype: str
    confidence: str
    verdict: str
    composition: CompositionResponse
    strengths: list[str]
    weaknesses: list[str]
    suggestions: list[str]
    recommendations: list[str]
    matchups: list[MatchupOddsResponse]
    meta_positions: list[MetaPositionResponse]


class LegalityResultResponse(BaseModel):
    rule_id: str
    rule: str
    description: str
    passed: bool
    message: str
    details: str | None = None


class LegalityResponse(BaseModel):
    """Tournament rule outcomes, in rule order."""

    is_legal: bool
    results: list[LegalityResultResponse]


class ComparisonResponse(BaseModel):
    deck1_name: str
    deck2_name: str
    win_probability: int
    predicted_wins: int
    overall_summary: str
    deck1_strengths: list[str]
    deck1_weaknesses: list[str]
    deck2_strengths: list[str]
    deck2_weaknesses: list[str]
    strategic_recommendations: list[str]
    alternative_cards: dict[str, list[str]]
    key_matchup_factors: list[str]


class MatchupRecordResponse(BaseModel):
    wins: int
    losses: int
    draws: int


class RecordSummaryResponse(BaseModel):
    wins: int
    losses: int
    draws: int
    total_games: int
    win_rate: int
    matchups: dict[str, MatchupRecordResponse]

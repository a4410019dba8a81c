"""
Card catalog endpoints.

Serves the locally synced card catalog with both filter sets.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from gundeck.api.schemas import CardResponse
from gundeck.models.card import Card
from gundeck.services.catalog import CardCatalog, CardFilters, TcgFilters, get_catalog

router = APIRouter(prefix="/cards", tags=["cards"])

FACET_ATTRIBUTES = ("colors", "category", "rarity", "set_name", "affinity")


class CardListResponse(BaseModel):
    cards: list[CardResponse]
    count: int


class CardFilterRequest(BaseModel):
    """Deck builder filters. Empty fields do not filter."""

    search: str = ""
    colors: list[str] = []
    types: list[str] = []
    rarities: list[str] = []
    cost: str = ""
    sets: list[str] = []


class FacetsResponse(BaseModel):
    """Distinct values available for each filterable attribute."""

    facets: dict[str, list[str]]


def _card_list(cards: list[Card]) -> CardListResponse:
    return CardListResponse(cards=[CardResponse.from_card(c) for c in cards], count=len(cards))


@router.get("", response_model=CardListResponse)
async def list_cards(
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
    query: str = "",
    type: str = "",
    rarity: str = "",
    set_name: str = "",
    affinity: str = "",
    min_bp: Annotated[int | None, Query(ge=0)] = None,
    max_bp: Annotated[int | None, Query(ge=0)] = None,
) -> CardListResponse:
    """
    Search the catalog with the library filters.

    When a BP bound is given, cards without a numeric BP are excluded.
    """
    filters = TcgFilters(
        query=query,
        type=type,
        rarity=rarity,
        set_name=set_name,
        affinity=affinity,
        min_bp=min_bp,
        max_bp=max_bp,
    )
    return _card_list(catalog.search(filters))


@router.post("/filter", response_model=CardListResponse)
async def filter_cards(
    request: CardFilterRequest,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> CardListResponse:
    """Filter the catalog with the deck builder facets."""
    filters = CardFilters(
        search=request.search,
        colors=request.colors,
        types=request.types,
        rarities=request.rarities,
        cost=request.cost,
        sets=request.sets,
    )
    return _card_list(catalog.filter(filters))


@router.get("/facets", response_model=FacetsResponse)
async def card_facets(
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> FacetsResponse:
    """Distinct colors, categories, rarities, sets and affinities in the catalog."""
    return FacetsResponse(
        facets={attribute: catalog.available_values(attribute) for attribute in FACET_ATTRIBUTES}
    )


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(
    card_id: str,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> CardResponse:
    """
    Get a single card by id.

    Returns 404 if the card is not in the catalog.
    """
    card = catalog.get(card_id)
    if card is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card not found: {card_id}",
        )
    return CardResponse.from_card(card)

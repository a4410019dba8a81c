"""
Health check endpoints.

Liveness and readiness checks; readiness also checks the database.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from gundeck.db.database import check_database, get_session
from gundeck.services.catalog import CardCatalog, get_catalog

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str | None = None
    cards: int | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness check. Does not check dependencies."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> HealthResponse:
    """
    Readiness check.

    Reports the number of catalog cards loaded. Returns 503 if the
    database is unavailable.
    """
    if not await check_database(session):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database="disconnected", cards=len(catalog))
    return HealthResponse(status="ready", database="connected", cards=len(catalog))

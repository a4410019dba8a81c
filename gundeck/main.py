import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gundeck.api import analysis_router, cards_router, decks_router, health_router
from gundeck.config import settings
from gundeck.db.database import init_db
from gundeck.services.catalog import get_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    logger.info("Card catalog ready with %d cards", len(get_catalog()))
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("gundeck"),
    lifespan=lifespan,
)

app.include_router(analysis_router)
app.include_router(cards_router)
app.include_router(decks_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

from gundeck.api.analysis import router as analysis_router
from gundeck.api.cards import router as cards_router
from gundeck.api.decks import router as decks_router
from gundeck.api.health import router as health_router

__all__ = [
    "analysis_router",
    "cards_router",
    "decks_router",
    "health_router",
]

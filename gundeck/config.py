from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "GunDeck"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/gundeck"

    # Card backend the catalog is synced from
    card_api_url: str = "http://localhost:5000"
    card_data_path: Path = Path(__file__).parent.parent / "data" / "cards.json"

    # Artificial delay before a deck comparison resolves
    comparison_latency_seconds: float = 2.0

    # Deck builder frontends allowed to call the API
    cors_origins: list[str] = ["*"]


settings = Settings()


# =============================================================================
# TOURNAMENT RULES
# =============================================================================

# Exact number of cards a tournament deck must contain
DECK_SIZE = 50

# Maximum copies of any single card
MAX_COPIES = 4

# Hard color limit, and the looser "color balance" limit reported separately
MAX_COLORS = 2
MAX_COLORS_SOFT = 3

# Cards that may not be registered in a tournament deck
BANNED_CARDS = frozenset({"Overpowered Card", "Broken Combo Piece"})


# =============================================================================
# CARD CATALOG
# =============================================================================

# Page size used by the card backend
CARD_PAGE_SIZE = 50

# Retries for a page the backend rejects with 429 or a 5xx, and the first wait
# in seconds (doubled on each further attempt)
CARD_FETCH_RETRIES = 3
CARD_RETRY_DELAY_SECONDS = 2.0

# Value the card backend uses for "not applicable"
SENTINEL = "-"

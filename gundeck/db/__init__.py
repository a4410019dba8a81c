from gundeck.db.database import get_session, init_db
from gundeck.db.operations import (
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

__all__ = [
    "add_deck_version",
    "add_game_record",
    "create_deck",
    "deck_to_model",
    "delete_deck",
    "get_deck",
    "get_session",
    "init_db",
    "list_decks",
    "toggle_deck_like",
    "update_deck",
]

from gundeck.parsers.card_data import (
    card_to_dict,
    detect_kind,
    is_present,
    load_cards,
    parse_card,
    parse_stat,
)
from gundeck.parsers.deck_data import (
    deck_from_dict,
    deck_to_dict,
    entries_from_dicts,
    entries_to_dicts,
)

__all__ = [
    "card_to_dict",
    "deck_from_dict",
    "deck_to_dict",
    "detect_kind",
    "entries_from_dicts",
    "entries_to_dicts",
    "is_present",
    "load_cards",
    "parse_card",
    "parse_stat",
]

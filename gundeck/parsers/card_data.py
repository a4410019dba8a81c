"""
Card record parsing.

The card backend serves two overlapping record shapes:

- simple: numeric ``cost`` and a ``colors`` list (deck-builder mock data)
- rich: ``tcgId`` with string ``ap``/``bp``, a single ``affinity`` and a
  nested ``needEnergy`` requirement (synced TCG data)

Records are tagged with a CardKind here, once, so analysis code can
dispatch on the tag instead of probing for fields.
"""

import json
import re
from pathlib import Path
from typing import Any

from gundeck.config import SENTINEL
from gundeck.models.card import Card, CardKind

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_stat(value: object) -> int | None:
    """
    Leniently parse a card stat.

    Reads the leading integer of a string ("3000" -> 3000, "12abc" -> 12).
    Returns None for None, "", the "-" sentinel and non-numeric strings.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if not isinstance(value, str) or value.strip() in ("", SENTINEL):
        return None

    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def is_present(value: str | None) -> bool:
    """True if a categorical field holds a real value (not empty or "-")."""
    return bool(value) and value != SENTINEL


def detect_kind(raw: dict[str, Any]) -> CardKind:
    """
    Decide which record shape a raw card dict uses.

    An explicit ``kind`` wins. Otherwise a ``tcgId`` or string AP/BP marks a
    rich record, and anything else is treated as simple.
    """
    kind = raw.get("kind")
    if kind in (CardKind.SIMPLE.value, CardKind.RICH.value):
        return CardKind(kind)

    if "tcgId" in raw:
        return CardKind.RICH
    if isinstance(raw.get("ap"), str) or isinstance(raw.get("bp"), str):
        return CardKind.RICH
    return CardKind.SIMPLE


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


def _optional_int(value: object) -> int | None:
    return parse_stat(value)


def _optional_cost(value: object) -> float | None:
    """Whole costs stay ints; a fractional numeric cost is kept as given."""
    if isinstance(value, float) and not value.is_integer():
        return value
    return parse_stat(value)


def _optional_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _nested(raw: dict[str, Any], key: str, inner: str) -> Any:
    value = raw.get(key)
    if isinstance(value, dict):
        return value.get(inner)
    return None


def _string_tuple(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list | tuple):
        return tuple(str(v) for v in value if v is not None)
    return ()


def parse_card(raw: dict[str, Any]) -> Card:
    """
    Build a Card from either backend record shape.

    Missing optional fields become None or empty; this never raises
    on partial records as long as they carry a name.
    """
    kind = detect_kind(raw)
    name = str(raw.get("name", ""))

    if kind is CardKind.RICH:
        card_id = raw.get("tcgId") or raw.get("id") or raw.get("_id") or raw.get("code") or name
        set_name = _nested(raw, "set", "name") if "set" in raw else raw.get("set_name")
        energy = _nested(raw, "needEnergy", "value") if "needEnergy" in raw else raw.get("energy")
        image = _nested(raw, "images", "large") or raw.get("imageUrl") or raw.get("image")
        return Card(
            id=str(card_id),
            name=name,
            kind=kind,
            category=_optional_str(raw.get("type", raw.get("category"))),
            rarity=_optional_str(raw.get("rarity")),
            set_name=_optional_str(set_name),
            ap=_optional_str(raw.get("ap")),
            bp=_optional_str(raw.get("bp")),
            affinity=_optional_str(raw.get("affinity")),
            energy=_optional_str(energy),
            code=_optional_str(raw.get("code")),
            power=_optional_int(raw.get("power")),
            effect=_optional_str(raw.get("effect")),
            description=_optional_str(raw.get("description")),
            image=_optional_str(image),
            market_price=_optional_float(raw.get("marketPrice", raw.get("market_price"))),
        )

    set_value = raw.get("set", raw.get("set_name"))
    if isinstance(set_value, dict):
        set_value = set_value.get("name")

    return Card(
        id=str(raw.get("id") or raw.get("code") or name),
        name=name,
        kind=kind,
        category=_optional_str(raw.get("type", raw.get("category"))),
        rarity=_optional_str(raw.get("rarity")),
        set_name=_optional_str(set_value),
        colors=_string_tuple(raw.get("colors")),
        cost=_optional_cost(raw.get("cost")),
        power=_optional_int(raw.get("power")),
        hp=_optional_int(raw.get("hp")),
        level=_optional_int(raw.get("level")),
        ap=_optional_str(raw.get("ap")),
        code=_optional_str(raw.get("code")),
        abilities=_string_tuple(raw.get("abilities")),
        description=_optional_str(raw.get("flavorText", raw.get("description"))),
        image=_optional_str(raw.get("image")),
        market_price=_optional_float(raw.get("marketPrice", raw.get("market_price"))),
    )


def card_to_dict(card: Card) -> dict[str, Any]:
    """Serialize a Card into a flat dict that parse_card reads back."""
    return {
        "id": card.id,
        "name": card.name,
        "kind": card.kind.value,
        "category": card.category,
        "rarity": card.rarity,
        "set_name": card.set_name,
        "colors": list(card.colors),
        "cost": card.cost,
        "power": card.power,
        "hp": card.hp,
        "level": card.level,
        "ap": card.ap,
        "bp": card.bp,
        "affinity": card.affinity,
        "energy": card.energy,
        "code": card.code,
        "abilities": list(card.abilities),
        "effect": card.effect,
        "description": card.description,
        "image": card.image,
        "market_price": card.market_price,
    }


def load_cards(path: Path) -> list[Card]:
    """
    Load a card catalog from a JSON array file.

    Args:
        path: Path to a JSON file holding a list of card records

    Returns:
        Parsed cards in file order. Records without a name are skipped.
    """
    with open(path, encoding="utf-8") as f:
        records = json.load(f)

    return [parse_card(record) for record in records if record.get("name")]

"""Flat key layout used to persist a dream list.

The layout is shared with previously persisted stores, so key names must not
change. Indices are zero-based.
"""

ROWS_QUANTITY_KEY = "rowsQuantity"
FAVORITE_CREATURE_KEY = "favoriteCreatureName"
MODEL_INITIALIZED_KEY = "modelInitialized"


def description_key(row: int) -> str:
    return f"description{row}"


def creature_name_key(row: int) -> str:
    return f"creatureName{row}"


def number_of_creatures_key(row: int) -> str:
    return f"numberOfCreatures{row}"


def effect_name_key(row: int, position: int) -> str:
    return f"DreamEffectsNamek={row}j={position}"


def size_of_set_key(row: int) -> str:
    return f"sizeOfSet{row}"


__all__ = [
    "ROWS_QUANTITY_KEY",
    "FAVORITE_CREATURE_KEY",
    "MODEL_INITIALIZED_KEY",
    "description_key",
    "creature_name_key",
    "number_of_creatures_key",
    "effect_name_key",
    "size_of_set_key",
]

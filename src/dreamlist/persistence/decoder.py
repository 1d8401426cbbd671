"""Rebuild a DreamListModel from the flat key layout written by the encoder."""

from __future__ import annotations

from typing import List, Optional

from dreamlist.core.errors import PersistedModelError
from dreamlist.core.model import DreamListModel
from dreamlist.core.records import Creature, Dream, Effect
from dreamlist.persistence import keys
from dreamlist.persistence.store import KeyValueStore
from dreamlist.utils.logging import log_calls


def has_persisted_model(store: KeyValueStore) -> bool:
    return store.get_int(keys.ROWS_QUANTITY_KEY) is not None


def _require_int(store: KeyValueStore, key: str) -> int:
    value = store.get_int(key)
    if value is None:
        raise PersistedModelError(key, f"Expected an integer, found {store.get(key)!r}")
    return value


def _require_string(store: KeyValueStore, key: str) -> str:
    value = store.get_string(key)
    if value is None:
        raise PersistedModelError(key, f"Expected a string, found {store.get(key)!r}")
    return value


def _decode_creature(store: KeyValueStore, key: str) -> Creature:
    name = _require_string(store, key)
    try:
        return Creature.from_name(name)
    except ValueError as exc:
        raise PersistedModelError(key, "Unknown creature name", cause=exc) from exc


def _decode_effects(store: KeyValueStore, row: int) -> List[Effect]:
    size = _require_int(store, keys.size_of_set_key(row))
    effects: List[Effect] = []
    for position in range(size):
        key = keys.effect_name_key(row, position)
        resource_name = _require_string(store, key)
        try:
            effects.append(Effect.from_resource_name(resource_name))
        except ValueError as exc:
            raise PersistedModelError(key, "Unknown effect", cause=exc) from exc
    return effects


def decode_dream(store: KeyValueStore, row: int) -> Dream:
    count_key = keys.number_of_creatures_key(row)
    count = _require_int(store, count_key)
    if count < 0:
        raise PersistedModelError(count_key, f"Number of creatures must be non-negative, found {count}")
    return Dream(
        description=_require_string(store, keys.description_key(row)),
        creature=_decode_creature(store, keys.creature_name_key(row)),
        effects=frozenset(_decode_effects(store, row)),
        number_of_creatures=count,
    )


@log_calls()
def decode_model(store: KeyValueStore, default_favorite: Optional[Creature] = None) -> DreamListModel:
    """
    Reconstruct the persisted dream list.

    `rowsQuantity` holds the last row index, so rows 0..rowsQuantity are read.
    Keys for rows past that index are leftovers of removed dreams and are
    ignored.

    Args:
        store: Store holding the key layout
        default_favorite: Favorite creature to use if none was persisted;
            defaults to the initial model's favorite

    Returns:
        The reconstructed model

    Raises:
        PersistedModelError: If a required key is missing or holds a bad value
    """
    last_row = _require_int(store, keys.ROWS_QUANTITY_KEY)
    if last_row < -1:
        raise PersistedModelError(keys.ROWS_QUANTITY_KEY, f"Last row index must be >= -1, found {last_row}")

    dreams = tuple(decode_dream(store, row) for row in range(last_row + 1))

    if store.get(keys.FAVORITE_CREATURE_KEY) is not None:
        favorite = _decode_creature(store, keys.FAVORITE_CREATURE_KEY)
    elif default_favorite is not None:
        favorite = default_favorite
    else:
        favorite = DreamListModel.initial().favorite_creature

    return DreamListModel(favorite_creature=favorite, dreams=dreams)


__all__ = ["decode_dream", "decode_model", "has_persisted_model"]

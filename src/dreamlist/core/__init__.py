"""Core value types and the snapshot diff engine."""

from __future__ import annotations

from .diff import Diff, DreamChange, Inserted, Removed, Updated, diff_models
from .errors import DreamListError, ModelInvariantError, PersistedModelError, StoreKeyError, StoreWriteError
from .model import DreamListModel
from .records import Color, Creature, CreatureKind, Dream, Effect

__all__ = [
    "Color",
    "Creature",
    "CreatureKind",
    "Diff",
    "Dream",
    "DreamChange",
    "DreamListError",
    "DreamListModel",
    "Effect",
    "Inserted",
    "ModelInvariantError",
    "PersistedModelError",
    "Removed",
    "StoreKeyError",
    "StoreWriteError",
    "Updated",
    "diff_models",
]

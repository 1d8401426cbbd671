"""Dream list snapshot diffing and incremental key-value persistence."""

from __future__ import annotations

from dreamlist.core import (
    Color,
    Creature,
    CreatureKind,
    Diff,
    Dream,
    DreamListModel,
    Effect,
    Inserted,
    Removed,
    Updated,
    diff_models,
)

__all__ = [
    "Color",
    "Creature",
    "CreatureKind",
    "Diff",
    "Dream",
    "DreamListModel",
    "Effect",
    "Inserted",
    "Removed",
    "Updated",
    "diff_models",
]

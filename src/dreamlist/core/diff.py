"""
Snapshot diffing for the dream list.

`diff_models(old, new)` compares two DreamListModel snapshots and describes
what happened to the dream list as at most one structural change, plus a flag
for a changed favorite creature.

Because the model only supports append, remove-last and replace-at-index, and
callers diff after every single mutation, the lengths of the two snapshots
differ by at most one:

    len(new) == len(old) + 1  ->  Inserted(new[-1])
    len(old) == len(new) + 1  ->  Removed(old[-1])
    len(old) == len(new)      ->  Updated(changed indices), or no change
    anything else             ->  ModelInvariantError
"""

from __future__ import annotations

from typing import Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator

from dreamlist.core.errors import ModelInvariantError
from dreamlist.core.model import DreamListModel
from dreamlist.core.records import Dream


class Inserted(BaseModel):
    """One dream appended at the end."""

    model_config = ConfigDict(frozen=True)

    type: Literal["inserted"] = "inserted"
    dream: Dream


class Removed(BaseModel):
    """One dream removed from the end."""

    model_config = ConfigDict(frozen=True)

    type: Literal["removed"] = "removed"
    dream: Dream


class Updated(BaseModel):
    """Dreams replaced in place, lengths unchanged."""

    model_config = ConfigDict(frozen=True)

    type: Literal["updated"] = "updated"
    indices: Tuple[int, ...]

    @field_validator("indices")
    @classmethod
    def _ascending_and_unique(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        if not v:
            raise ValueError("Updated requires at least one index; use no change instead")
        if any(b <= a for a, b in zip(v, v[1:])):
            raise ValueError(f"Updated indices must be strictly ascending, got {list(v)}")
        return v


DreamChange = Union[Inserted, Removed, Updated]


class Diff(BaseModel):
    """
    Result of comparing two dream list snapshots.

    Attributes:
        change: The structural change to the dreams, None if they are equal
        favorite_creature_changed: Whether the favorite creature's name changed
        from_model: The old snapshot
        to_model: The new snapshot
    """

    model_config = ConfigDict(frozen=True)

    change: Optional[DreamChange] = None
    favorite_creature_changed: bool
    from_model: DreamListModel
    to_model: DreamListModel

    @property
    def has_any_dream_changes(self) -> bool:
        return self.change is not None

    @property
    def has_any_changes(self) -> bool:
        return self.favorite_creature_changed or self.has_any_dream_changes

    def describe(self) -> str:
        """One-line human-readable summary."""
        parts = []
        if isinstance(self.change, Inserted):
            parts.append(f"inserted {self.change.dream.description!r}")
        elif isinstance(self.change, Removed):
            parts.append(f"removed {self.change.dream.description!r}")
        elif isinstance(self.change, Updated):
            parts.append("updated " + ", ".join(str(i) for i in self.change.indices))
        if self.favorite_creature_changed:
            parts.append(f"favorite creature -> {self.to_model.favorite_creature.name}")
        return "; ".join(parts) if parts else "no changes"


def _changed_indices(old: DreamListModel, new: DreamListModel) -> Tuple[int, ...]:
    return tuple(idx for idx, dream in enumerate(old.dreams) if dream != new.dreams[idx])


def diff_models(old: DreamListModel, new: DreamListModel) -> Diff:
    """
    Compare two snapshots.

    Args:
        old: Snapshot before the mutation
        new: Snapshot after the mutation

    Returns:
        Diff describing the change

    Raises:
        ModelInvariantError: If the dream counts differ by more than one
    """
    old_count = len(old.dreams)
    new_count = len(new.dreams)

    change: Optional[DreamChange]
    if new_count == old_count + 1:
        change = Inserted(dream=new.dreams[-1])
    elif old_count == new_count + 1:
        change = Removed(dream=old.dreams[-1])
    elif old_count == new_count:
        indices = _changed_indices(old, new)
        change = Updated(indices=indices) if indices else None
    else:
        raise ModelInvariantError(old_count, new_count)

    return Diff(
        change=change,
        favorite_creature_changed=old.favorite_creature.name != new.favorite_creature.name,
        from_model=old,
        to_model=new,
    )


__all__ = [
    "Inserted",
    "Removed",
    "Updated",
    "DreamChange",
    "Diff",
    "diff_models",
]

"""
Dream List Model

DreamListModel is the ordered collection of dreams behind the dream list, plus
the user's favorite creature. It is a frozen value: every mutator returns a
new snapshot and leaves the receiver untouched, so the caller can keep the old
snapshot around long enough to diff it against the new one.

Only three list mutations exist: append to the end, remove from the end, and
replace at an index. The diff engine relies on this.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

from pydantic import BaseModel, ConfigDict, Field

from dreamlist.core.records import Color, Creature, Dream, Effect

if TYPE_CHECKING:
    from dreamlist.core.diff import Diff


class DreamListModel(BaseModel):
    """
    Immutable snapshot of the dream list.

    Attributes:
        favorite_creature: The preferred creature, independent of the dreams
        dreams: Dreams in insertion order

    Examples:
        >>> model = DreamListModel.initial()
        >>> len(model)
        3
        >>> bigger = model.append(Dream(description="Dream 4", creature=Creature.shark()))
        >>> len(model), len(bigger)
        (3, 4)
    """

    model_config = ConfigDict(frozen=True)

    favorite_creature: Creature
    dreams: Tuple[Dream, ...] = Field(default_factory=tuple)

    @classmethod
    def initial(cls) -> "DreamListModel":
        """Default data used when nothing has been persisted yet."""
        return cls(
            favorite_creature=Creature.unicorn(Color.PINK),
            dreams=(
                Dream(
                    description="Dream 1",
                    creature=Creature.unicorn(Color.PINK),
                    effects={Effect.FIRE_BREATHING},
                ),
                Dream(
                    description="Dream 2",
                    creature=Creature.unicorn(Color.YELLOW),
                    effects={Effect.LASER_FOCUS, Effect.MAGIC},
                    number_of_creatures=2,
                ),
                Dream(
                    description="Dream 3",
                    creature=Creature.unicorn(Color.WHITE),
                    effects={Effect.FIRE_BREATHING, Effect.LASER_FOCUS},
                    number_of_creatures=3,
                ),
            ),
        )

    def append(self, dream: Dream) -> "DreamListModel":
        """Return a new snapshot with `dream` added at the end."""
        return self.model_copy(update={"dreams": self.dreams + (dream,)})

    def remove_last(self) -> Tuple["DreamListModel", Dream]:
        """
        Remove the last dream.

        Returns:
            Tuple of (new snapshot, removed dream)

        Raises:
            IndexError: If there are no dreams
        """
        if not self.dreams:
            raise IndexError("remove_last() on an empty dream list")
        return self.model_copy(update={"dreams": self.dreams[:-1]}), self.dreams[-1]

    def replace(self, index: int, dream: Dream) -> "DreamListModel":
        """
        Return a new snapshot with the dream at `index` replaced.

        Raises:
            IndexError: If index is out of range
        """
        if not -len(self.dreams) <= index < len(self.dreams):
            raise IndexError(f"Dream index {index} out of range for {len(self.dreams)} dream(s)")
        dreams = list(self.dreams)
        dreams[index] = dream
        return self.model_copy(update={"dreams": tuple(dreams)})

    def with_favorite_creature(self, creature: Creature) -> "DreamListModel":
        return self.model_copy(update={"favorite_creature": creature})

    def diffed(self, other: "DreamListModel") -> "Diff":
        """Diff this snapshot (old) against `other` (new)."""
        from dreamlist.core.diff import diff_models

        return diff_models(self, other)

    def __getitem__(self, index: int) -> Dream:
        return self.dreams[index]

    def __len__(self) -> int:
        return len(self.dreams)

    def __str__(self) -> str:
        return f"DreamListModel(favorite={self.favorite_creature.name}, dreams={len(self.dreams)})"


__all__ = ["DreamListModel"]

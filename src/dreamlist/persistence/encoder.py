"""
Persistence Encoder

Translates a Diff into the ordered batch of key-value writes that keeps the
persisted dream list in sync with the in-memory model.

Write policy:
- Inserted / Removed: every index after the change point shifts, so the whole
  new dream list is rewritten (full rewrite)
- Updated: only the fields that differ at the changed indices are written
- Favorite creature: written whenever its name changed, after any item writes

Bootstrap guard:
    The first Updated diff ever persisted is preceded by a full rewrite of the
    *old* snapshot, followed by the `modelInitialized` flag. Field-level
    updates are only meaningful on top of a complete baseline, and the
    baseline is written exactly once. The bootstrap state is an explicit input
    and output of `encode`; the encoder itself never reads the store.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from pydantic import BaseModel, ConfigDict, Field

from dreamlist.core.diff import Diff, Inserted, Removed, Updated
from dreamlist.core.model import DreamListModel
from dreamlist.core.records import Dream
from dreamlist.persistence import keys
from dreamlist.persistence.store import StoreWrite

logger = logging.getLogger(__name__)


class EncodeResult(BaseModel):
    """Writes to apply, in order, and the bootstrap state after applying them."""

    model_config = ConfigDict(frozen=True)

    writes: List[StoreWrite] = Field(default_factory=list)
    bootstrapped: bool

    @property
    def written_keys(self) -> List[str]:
        return [write.key for write in self.writes]

    def as_dict(self) -> dict:
        """Final value per key, as a store would hold it after applying the batch."""
        return {write.key: write.value for write in self.writes}


class PersistenceEncoder:
    """Builds store writes for diffs and whole snapshots."""

    def encode(self, diff: Diff, bootstrapped: bool) -> EncodeResult:
        """
        Encode a diff into store writes.

        Args:
            diff: Diff between the old and new snapshot
            bootstrapped: Whether a baseline has already been persisted

        Returns:
            EncodeResult with the ordered writes and the new bootstrap state
        """
        writes: List[StoreWrite] = []
        change = diff.change

        if isinstance(change, (Inserted, Removed)):
            writes.extend(self.full_rewrite(diff.to_model.dreams))
        elif isinstance(change, Updated):
            if not bootstrapped:
                logger.info("Writing baseline of %d dream(s) before first update", len(diff.from_model.dreams))
                writes.extend(self.full_rewrite(diff.from_model.dreams))
                writes.append(StoreWrite(key=keys.MODEL_INITIALIZED_KEY, value=True))
                bootstrapped = True
            for idx in change.indices:
                writes.extend(self.dream_updates(diff.from_model.dreams[idx], diff.to_model.dreams[idx], idx))

        if diff.favorite_creature_changed:
            writes.append(self.favorite_creature_write(diff.to_model))

        logger.debug("Encoded %s into %d write(s)", diff.describe(), len(writes))
        return EncodeResult(writes=writes, bootstrapped=bootstrapped)

    def encode_snapshot(self, model: DreamListModel) -> EncodeResult:
        """Full rewrite of a snapshot, including the favorite creature, marked as bootstrapped."""
        writes = self.full_rewrite(model.dreams)
        writes.append(self.favorite_creature_write(model))
        writes.append(StoreWrite(key=keys.MODEL_INITIALIZED_KEY, value=True))
        return EncodeResult(writes=writes, bootstrapped=True)

    def full_rewrite(self, dreams: Sequence[Dream]) -> List[StoreWrite]:
        """Every field of every dream, preceded by the last row index."""
        writes = [StoreWrite(key=keys.ROWS_QUANTITY_KEY, value=len(dreams) - 1)]
        for row, dream in enumerate(dreams):
            writes.append(StoreWrite(key=keys.description_key(row), value=dream.description))
            writes.append(StoreWrite(key=keys.creature_name_key(row), value=dream.creature.name))
            writes.append(StoreWrite(key=keys.number_of_creatures_key(row), value=dream.number_of_creatures))
            writes.extend(self.effect_writes(dream, row))
        return writes

    def dream_updates(self, before: Dream, after: Dream, row: int) -> List[StoreWrite]:
        """Writes for the fields that differ between two versions of one dream."""
        writes: List[StoreWrite] = []
        if before.description != after.description:
            writes.append(StoreWrite(key=keys.description_key(row), value=after.description))
        if before.number_of_creatures != after.number_of_creatures:
            writes.append(StoreWrite(key=keys.number_of_creatures_key(row), value=after.number_of_creatures))
        if before.creature.name != after.creature.name:
            writes.append(StoreWrite(key=keys.creature_name_key(row), value=after.creature.name))
        if before.effects != after.effects:
            writes.extend(self.effect_writes(after, row))
        return writes

    @staticmethod
    def effect_writes(dream: Dream, row: int) -> List[StoreWrite]:
        # positions follow resource-name order so repeated encodings agree
        writes = [
            StoreWrite(key=keys.effect_name_key(row, position), value=effect.resource_name)
            for position, effect in enumerate(dream.sorted_effects())
        ]
        writes.append(StoreWrite(key=keys.size_of_set_key(row), value=len(dream.effects)))
        return writes

    @staticmethod
    def favorite_creature_write(model: DreamListModel) -> StoreWrite:
        return StoreWrite(key=keys.FAVORITE_CREATURE_KEY, value=model.favorite_creature.name)


__all__ = ["EncodeResult", "PersistenceEncoder"]

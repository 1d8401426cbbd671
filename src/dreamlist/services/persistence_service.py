"""Persistence Service: diff, encode and store dream list snapshots."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from pydantic import BaseModel, ConfigDict

from dreamlist.core.diff import Diff, diff_models
from dreamlist.core.model import DreamListModel
from dreamlist.persistence import keys
from dreamlist.persistence.decoder import decode_model, has_persisted_model
from dreamlist.persistence.encoder import PersistenceEncoder
from dreamlist.persistence.store import KeyValueStore, WriteReport, apply_writes
from dreamlist.utils.logging import log_calls

logger = logging.getLogger(__name__)


class PersistOutcome(BaseModel):
    """Diff that was persisted and the report of its writes."""

    model_config = ConfigDict(frozen=True)

    diff: Diff
    report: WriteReport


class DreamListPersistence:
    """
    Keeps a key-value store in step with successive dream list snapshots.

    The bootstrap flag is read from the store once, then carried in memory
    and handed to the encoder explicitly. `record` runs on the caller's
    thread; `record_async` queues the same work on a single background
    writer, so diffs are persisted one at a time in submission order. Calls
    from either path are serialized, the store has no transactional
    isolation of its own.
    """

    def __init__(self, store: KeyValueStore, encoder: Optional[PersistenceEncoder] = None):
        """
        Initialize the service.

        Args:
            store: Backend receiving the writes
            encoder: Encoder to use (a default PersistenceEncoder if None)
        """
        self.store = store
        self.encoder = encoder or PersistenceEncoder()
        self._bootstrapped = store.get_bool(keys.MODEL_INITIALIZED_KEY)
        self._lock = threading.Lock()
        self._writer: Optional[ThreadPoolExecutor] = None

    @property
    def bootstrapped(self) -> bool:
        return self._bootstrapped

    @log_calls()
    def record(self, old: DreamListModel, new: DreamListModel) -> PersistOutcome:
        """
        Diff two snapshots and persist the result.

        A failed write does not raise; it is logged and listed in the
        returned report so the caller can retry it. The in-memory model stays
        authoritative either way.

        Raises:
            ModelInvariantError: If the snapshots differ by more than one dream
        """
        with self._lock:
            diff = diff_models(old, new)
            result = self.encoder.encode(diff, self._bootstrapped)
            report = apply_writes(self.store, result.writes)

            if result.bootstrapped and not self._bootstrapped:
                # adopt only once the flag itself has landed
                self._bootstrapped = report.succeeded(keys.MODEL_INITIALIZED_KEY)

        if report.ok:
            logger.info("Persisted %s (%d write(s))", diff.describe(), len(report.applied))
        else:
            logger.warning(
                "Persisted %s with %d failed write(s): %s",
                diff.describe(),
                len(report.failures),
                ", ".join(write.key for write in report.failed_writes),
            )
        return PersistOutcome(diff=diff, report=report)

    def record_async(self, old: DreamListModel, new: DreamListModel) -> "Future[PersistOutcome]":
        """
        Queue `record` on the background writer and return immediately.

        The returned future resolves to the PersistOutcome, or raises
        ModelInvariantError from `result()` if the snapshots were invalid.
        """
        if self._writer is None:
            self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dreamlist-writer")
        return self._writer.submit(self.record, old, new)

    def close(self, wait: bool = True) -> None:
        """Stop the background writer; with `wait`, pending diffs are persisted first."""
        if self._writer is not None:
            self._writer.shutdown(wait=wait)
            self._writer = None

    def __enter__(self) -> "DreamListPersistence":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def save_snapshot(self, model: DreamListModel) -> WriteReport:
        """Write a complete snapshot, including the favorite creature and bootstrap flag."""
        with self._lock:
            result = self.encoder.encode_snapshot(model)
            report = apply_writes(self.store, result.writes)
            if report.succeeded(keys.MODEL_INITIALIZED_KEY):
                self._bootstrapped = True
        logger.info("Saved snapshot %s (%d write(s), %d failed)", model, len(report.applied), len(report.failures))
        return report

    @log_calls()
    def load(self, default: Optional[DreamListModel] = None) -> DreamListModel:
        """
        Load the persisted model.

        Args:
            default: Model returned when nothing is persisted yet
                (DreamListModel.initial() if None)

        Raises:
            PersistedModelError: If the persisted layout is incomplete
        """
        fallback = default if default is not None else DreamListModel.initial()
        if not has_persisted_model(self.store):
            logger.info("No persisted dream list found, using defaults")
            return fallback
        return decode_model(self.store, default_favorite=fallback.favorite_creature)


__all__ = ["DreamListPersistence", "PersistOutcome"]

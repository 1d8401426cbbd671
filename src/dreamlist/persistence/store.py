"""
Key-value store abstraction and write application.

The persistence encoder never talks to a backend directly. It produces an
ordered batch of StoreWrite entries; `apply_writes` hands the whole batch to
`KeyValueStore.set_many`, which lets a backend persist it in one go. A failing
key is recorded in the returned WriteReport and the remaining writes still
run. Nothing is rolled back, and every failed key can be retried on its own.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

from dreamlist.core.errors import StoreWriteError

logger = logging.getLogger(__name__)

StoreValue = Union[StrictBool, StrictInt, StrictStr]
StoreItem = Tuple[str, Union[bool, int, str]]


class KeyValueStore(ABC):
    """Flat string-keyed storage for booleans, integers and strings."""

    @abstractmethod
    def get(self, key: str) -> Union[bool, int, str, None]:
        """Return the stored value, or None if the key is absent."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: Union[bool, int, str]) -> None:
        """
        Store a value.

        Raises:
            StoreWriteError: If the backend could not persist the value
        """
        raise NotImplementedError

    @abstractmethod
    def keys(self) -> List[str]:
        raise NotImplementedError

    def set_many(self, items: Sequence[StoreItem]) -> List[Optional[Exception]]:
        """
        Store several values in order.

        Backends that can persist a batch more cheaply than key by key should
        override this. The default calls `set` per item and keeps going past
        failures.

        Returns:
            One entry per item: None if the write landed, else the error it raised
        """
        errors: List[Optional[Exception]] = []
        for key, value in items:
            try:
                self.set(key, value)
            except Exception as exc:
                errors.append(exc)
            else:
                errors.append(None)
        return errors

    def get_bool(self, key: str) -> bool:
        """Return the boolean at `key`, False if absent or not a boolean."""
        value = self.get(key)
        return value if isinstance(value, bool) else False

    def get_int(self, key: str) -> Optional[int]:
        value = self.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value

    def get_string(self, key: str) -> Optional[str]:
        value = self.get(key)
        return value if isinstance(value, str) else None


class InMemoryStore(KeyValueStore):
    """Dict-backed store, used in tests and as a scratch backend."""

    def __init__(self, initial: Optional[Dict[str, Union[bool, int, str]]] = None):
        self._data: Dict[str, Union[bool, int, str]] = dict(initial or {})

    def get(self, key: str) -> Union[bool, int, str, None]:
        return self._data.get(key)

    def set(self, key: str, value: Union[bool, int, str]) -> None:
        self._data[key] = value

    def keys(self) -> List[str]:
        return sorted(self._data)

    def as_dict(self) -> Dict[str, Union[bool, int, str]]:
        return dict(self._data)


class YamlFileStore(KeyValueStore):
    """
    Store backed by a single YAML mapping on disk.

    The file is read once on construction. `set_many` applies a whole batch
    in memory and rewrites the file once; if that rewrite fails, the batch is
    undone in memory and every item is reported failed, so retrying the
    batch re-flushes it.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._data: Dict[str, Union[bool, int, str]] = self._read()

    def _read(self) -> Dict[str, Union[bool, int, str]]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Store file {self.path} must contain a YAML mapping")
        return {str(k): v for k, v in data.items()}

    def get(self, key: str) -> Union[bool, int, str, None]:
        return self._data.get(key)

    def set(self, key: str, value: Union[bool, int, str]) -> None:
        error = self.set_many([(key, value)])[0]
        if error is not None:
            raise error

    def set_many(self, items: Sequence[StoreItem]) -> List[Optional[Exception]]:
        items = list(items)
        if not items:
            return []
        previous = dict(self._data)
        for key, value in items:
            self._data[key] = value
        try:
            self._flush()
        except OSError as exc:
            self._data = previous
            return [StoreWriteError(key, f"Failed to write {self.path}", cause=exc) for key, _value in items]
        return [None] * len(items)

    def keys(self) -> List[str]:
        return sorted(self._data)

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self._data, f, sort_keys=True, allow_unicode=True)
        os.replace(tmp_path, self.path)


class StoreWrite(BaseModel):
    """A single key/value write produced by the encoder."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: StoreValue


class WriteFailure(BaseModel):
    """A write that the store rejected, with the error it raised."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    write: StoreWrite
    error: StoreWriteError


class WriteReport(BaseModel):
    """Outcome of applying a batch of writes."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    applied: List[StoreWrite] = Field(default_factory=list)
    failures: List[WriteFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failed_writes(self) -> List[StoreWrite]:
        return [failure.write for failure in self.failures]

    def succeeded(self, key: str) -> bool:
        """True if a write to `key` was applied and no write to it failed."""
        if any(failure.write.key == key for failure in self.failures):
            return False
        return any(write.key == key for write in self.applied)

    def retry(self, store: KeyValueStore) -> "WriteReport":
        """Re-apply only the failed writes, in their original order."""
        return apply_writes(store, self.failed_writes)


def apply_writes(store: KeyValueStore, writes: Iterable[StoreWrite]) -> WriteReport:
    """
    Apply writes to a store in order, as one batch.

    Any exception a backend raises for a key is wrapped in StoreWriteError
    and recorded against that write; the rest of the batch still runs.

    Args:
        store: Target store
        writes: Ordered writes; order is preserved exactly

    Returns:
        WriteReport listing applied writes and per-key failures
    """
    writes = list(writes)
    report = WriteReport()
    if not writes:
        return report

    try:
        errors = store.set_many([(write.key, write.value) for write in writes])
    except Exception as exc:
        errors = [exc] * len(writes)

    for write, error in zip(writes, errors):
        if error is None:
            report.applied.append(write)
            continue
        if not isinstance(error, StoreWriteError):
            error = StoreWriteError(write.key, cause=error)
        logger.warning("Store write failed for key %s: %s", write.key, error)
        report.failures.append(WriteFailure(write=write, error=error))
    logger.debug("Applied %d write(s), %d failed", len(report.applied), len(report.failures))
    return report


__all__ = [
    "KeyValueStore",
    "InMemoryStore",
    "YamlFileStore",
    "StoreItem",
    "StoreValue",
    "StoreWrite",
    "WriteFailure",
    "WriteReport",
    "apply_writes",
]

"""Error types raised by the diff engine and the persistence layer."""

from __future__ import annotations


class DreamListError(Exception):
    """Base class for all dream list errors."""


class ModelInvariantError(DreamListError, ValueError):
    """Two snapshots differ in a way the permitted mutations cannot produce."""

    def __init__(self, old_count: int, new_count: int):
        self.old_count = old_count
        self.new_count = new_count
        super().__init__(
            f"Dream count changed from {old_count} to {new_count}; "
            "only a single append, remove-last, or in-place replace is allowed between diffs"
        )


class StoreKeyError(DreamListError):
    """Failure tied to one store key, with an optional underlying cause."""

    def __init__(self, key: str, message: str, *, cause: Exception | None = None):
        self.key = key
        self.message = message
        self.cause = cause
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        base = f"{self.message} (key: {self.key})"
        if self.cause:
            return f"{base}: {self.cause}"
        return base

    def __str__(self) -> str:
        return self._build_message()


class StoreWriteError(StoreKeyError, RuntimeError):
    """A key-value store write that did not land."""

    def __init__(self, key: str, message: str = "Store write failed", *, cause: Exception | None = None):
        super().__init__(key, message, cause=cause)


class PersistedModelError(StoreKeyError, RuntimeError):
    """The persisted key layout is missing a key or holds an unusable value."""


__all__ = [
    "DreamListError",
    "ModelInvariantError",
    "StoreKeyError",
    "StoreWriteError",
    "PersistedModelError",
]

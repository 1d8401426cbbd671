"""Service Layer: orchestration of diffing and persistence."""

from __future__ import annotations

from .persistence_service import DreamListPersistence, PersistOutcome

__all__ = [
    "DreamListPersistence",
    "PersistOutcome",
]

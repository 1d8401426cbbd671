"""Persistence Layer: key layout, stores, encoder and decoder."""

from __future__ import annotations

from .decoder import decode_model, has_persisted_model
from .encoder import EncodeResult, PersistenceEncoder
from .store import (
    InMemoryStore,
    KeyValueStore,
    StoreWrite,
    WriteFailure,
    WriteReport,
    YamlFileStore,
    apply_writes,
)

__all__ = [
    "EncodeResult",
    "InMemoryStore",
    "KeyValueStore",
    "PersistenceEncoder",
    "StoreWrite",
    "WriteFailure",
    "WriteReport",
    "YamlFileStore",
    "apply_writes",
    "decode_model",
    "has_persisted_model",
]

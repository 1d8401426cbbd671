from __future__ import annotations

"""Utilities for resolving the dream list store path."""

from pathlib import Path


def outputs_dir() -> Path:
    return Path.cwd() / "outputs"


def default_store_path() -> Path:
    return outputs_dir() / "dreams.yaml"


def resolve_store_path(path: str | None) -> Path:
    """Resolve the store file.

    An explicit path is used as given; a missing .yaml extension is added.
    Without a path, ./outputs/dreams.yaml is used.
    """
    if not path:
        return default_store_path()
    p = Path(path)
    if p.suffix not in (".yaml", ".yml"):
        p = p.with_name(f"{p.name}.yaml")
    return p


__all__ = [
    "outputs_dir",
    "default_store_path",
    "resolve_store_path",
]

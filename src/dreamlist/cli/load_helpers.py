from __future__ import annotations

"""Shared helpers for opening stores and loading models with CLI-friendly errors."""

from pathlib import Path

import typer
import yaml
from rich.console import Console

from dreamlist.core.errors import PersistedModelError
from dreamlist.core.model import DreamListModel
from dreamlist.persistence.store import YamlFileStore
from dreamlist.services.persistence_service import DreamListPersistence


def open_or_exit(path: Path, *, console: Console) -> DreamListPersistence:
    try:
        store = YamlFileStore(path)
    except (yaml.YAMLError, ValueError, OSError) as err:
        console.print(f"[red]Failed to open store:[/red] {path}\n{err}")
        raise typer.Exit(code=1)
    return DreamListPersistence(store)


def load_or_exit(persistence: DreamListPersistence, *, console: Console) -> DreamListModel:
    try:
        return persistence.load()
    except PersistedModelError as err:
        console.print(f"[red]Failed to load dream list:[/red] {err}")
        raise typer.Exit(code=1)


__all__ = ["open_or_exit", "load_or_exit"]

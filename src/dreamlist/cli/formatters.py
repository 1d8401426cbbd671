"""Formatting helpers for CLI presentation."""

from __future__ import annotations

from rich.table import Table

from dreamlist.core.diff import Diff
from dreamlist.core.model import DreamListModel
from dreamlist.persistence.store import KeyValueStore, WriteReport


def format_effects(effects) -> str:
    names = sorted(effect.resource_name for effect in effects)
    return ", ".join(names) if names else "-"


def build_model_table(model: DreamListModel, title: str = "Dreams") -> Table:
    """Build a table with one row per dream."""
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Description")
    table.add_column("Creature")
    table.add_column("Count", justify="right")
    table.add_column("Effects")

    for idx, dream in enumerate(model.dreams):
        table.add_row(
            str(idx),
            dream.description,
            dream.creature.name,
            str(dream.number_of_creatures),
            format_effects(dream.effects),
        )
    return table


def build_store_table(store: KeyValueStore) -> Table:
    """Build a table of the raw persisted keys and values."""
    table = Table(title="Persisted keys")
    table.add_column("Key")
    table.add_column("Value")
    table.add_column("Type")
    for key in store.keys():
        value = store.get(key)
        table.add_row(key, str(value), type(value).__name__)
    return table


def build_writes_table(report: WriteReport) -> Table:
    table = Table(title="Store writes")
    table.add_column("Key")
    table.add_column("Value")
    table.add_column("Status")
    for write in report.applied:
        table.add_row(write.key, str(write.value), "[green]ok[/green]")
    for failure in report.failures:
        table.add_row(failure.write.key, str(failure.write.value), f"[red]failed[/red] {failure.error.message}")
    return table


def format_diff(diff: Diff) -> str:
    if not diff.has_any_changes:
        return "[dim]No changes made[/dim]"
    return f"[bold]Change:[/bold] {diff.describe()}"


__all__ = [
    "format_effects",
    "build_model_table",
    "build_store_table",
    "build_writes_table",
    "format_diff",
]

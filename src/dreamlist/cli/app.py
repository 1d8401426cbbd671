"""
Dream list CLI: seed, inspect and edit a dream list persisted in a YAML store.

Every editing command loads the persisted model, applies one mutation to a
copy, and records the diff between the two snapshots, so the store receives
exactly the writes the encoder derives for that change.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import typer
from rich.console import Console

from dreamlist.cli.formatters import (
    build_model_table,
    build_store_table,
    build_writes_table,
    format_diff,
)
from dreamlist.cli.load_helpers import load_or_exit, open_or_exit
from dreamlist.cli.paths import resolve_store_path
from dreamlist.core.model import DreamListModel
from dreamlist.core.records import Creature, Dream, Effect
from dreamlist.persistence.decoder import has_persisted_model
from dreamlist.services.persistence_service import DreamListPersistence

app = typer.Typer(help="Dream list CLI: seed, inspect and edit a persisted dream list.")
console = Console()

STORE_HELP = "Path to the YAML store (default: outputs/dreams.yaml)"


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log diff and write details")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _parse_creature(name: str) -> Creature:
    try:
        return Creature.from_name(name)
    except ValueError:
        console.print(f"[red]Unknown creature[/red]: {name} (e.g. 'Pink Unicorn', 'Shark')")
        raise typer.Exit(code=2)


def _parse_effects(names: List[str]) -> frozenset:
    effects = set()
    for name in names:
        try:
            effects.add(Effect.from_resource_name(name))
        except ValueError:
            valid = ", ".join(sorted(effect.resource_name for effect in Effect))
            console.print(f"[red]Unknown effect[/red]: {name} (valid: {valid})")
            raise typer.Exit(code=2)
    return frozenset(effects)


def _commit(persistence: DreamListPersistence, old: DreamListModel, new: DreamListModel, *, show_writes: bool) -> None:
    outcome = persistence.record(old, new)
    console.print(format_diff(outcome.diff))
    if show_writes:
        console.print(build_writes_table(outcome.report))
    if not outcome.report.ok:
        console.print(
            f"[yellow]Warning:[/yellow] {len(outcome.report.failures)} write(s) failed; persisted state may be stale"
        )
        raise typer.Exit(code=1)


@app.command()
def seed(
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing dream list"),
) -> None:
    """Write the default dream list to the store."""
    path = resolve_store_path(store)
    persistence = open_or_exit(path, console=console)
    if has_persisted_model(persistence.store) and not force:
        console.print(f"[red]Store already holds a dream list[/red]: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    report = persistence.save_snapshot(DreamListModel.initial())
    if not report.ok:
        console.print(f"[red]Failed to seed store[/red]: {len(report.failures)} write(s) failed")
        raise typer.Exit(code=1)
    console.print(f"[green]OK[/green] Seeded {path} ({len(report.applied)} write(s))")


@app.command()
def show(
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
    raw: bool = typer.Option(False, "--raw", help="Show persisted keys instead of the dream list"),
) -> None:
    """Show the persisted dream list."""
    persistence = open_or_exit(resolve_store_path(store), console=console)
    if raw:
        console.print(build_store_table(persistence.store))
        return
    model = load_or_exit(persistence, console=console)
    console.print(f"[bold]Favorite creature:[/bold] {model.favorite_creature.name}")
    console.print(build_model_table(model))


@app.command()
def append(
    description: str = typer.Argument(..., help="Dream description"),
    creature: str = typer.Option("Pink Unicorn", "--creature", "-c", help="Creature name, e.g. 'Yellow Unicorn'"),
    effects: List[str] = typer.Option([], "--effect", "-e", help="Effect name (repeatable)"),
    count: int = typer.Option(1, "--count", "-n", min=0, help="Number of creatures"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
    show_writes: bool = typer.Option(False, "--writes", help="List the store writes"),
) -> None:
    """Append a dream to the end of the list."""
    persistence = open_or_exit(resolve_store_path(store), console=console)
    old = load_or_exit(persistence, console=console)
    dream = Dream(
        description=description,
        creature=_parse_creature(creature),
        effects=_parse_effects(effects),
        number_of_creatures=count,
    )
    _commit(persistence, old, old.append(dream), show_writes=show_writes)


@app.command()
def remove(
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
    show_writes: bool = typer.Option(False, "--writes", help="List the store writes"),
) -> None:
    """Remove the last dream."""
    persistence = open_or_exit(resolve_store_path(store), console=console)
    old = load_or_exit(persistence, console=console)
    if len(old) == 0:
        console.print("[red]The dream list is empty[/red]")
        raise typer.Exit(code=1)
    new, _removed = old.remove_last()
    _commit(persistence, old, new, show_writes=show_writes)


@app.command()
def edit(
    index: int = typer.Argument(..., help="Index of the dream to edit"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    creature: Optional[str] = typer.Option(None, "--creature", "-c", help="New creature name"),
    effects: Optional[List[str]] = typer.Option(None, "--effect", "-e", help="Replace effects (repeatable)"),
    clear_effects: bool = typer.Option(False, "--clear-effects", help="Remove all effects"),
    count: Optional[int] = typer.Option(None, "--count", "-n", min=0, help="New number of creatures"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
    show_writes: bool = typer.Option(False, "--writes", help="List the store writes"),
) -> None:
    """Replace fields of the dream at INDEX."""
    persistence = open_or_exit(resolve_store_path(store), console=console)
    old = load_or_exit(persistence, console=console)
    if not 0 <= index < len(old):
        console.print(f"[red]No dream at index[/red] {index} ({len(old)} dream(s))")
        raise typer.Exit(code=2)

    update = {}
    if description is not None:
        update["description"] = description
    if creature is not None:
        update["creature"] = _parse_creature(creature)
    if clear_effects:
        update["effects"] = frozenset()
    elif effects:
        update["effects"] = _parse_effects(effects)
    if count is not None:
        update["number_of_creatures"] = count

    dream = old[index].model_copy(update=update)
    _commit(persistence, old, old.replace(index, dream), show_writes=show_writes)


@app.command()
def favorite(
    creature: str = typer.Argument(..., help="Creature name, e.g. 'Red Dragon'"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
    show_writes: bool = typer.Option(False, "--writes", help="List the store writes"),
) -> None:
    """Set the favorite creature."""
    persistence = open_or_exit(resolve_store_path(store), console=console)
    old = load_or_exit(persistence, console=console)
    _commit(persistence, old, old.with_favorite_creature(_parse_creature(creature)), show_writes=show_writes)


if __name__ == "__main__":
    app()

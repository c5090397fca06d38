"""Auxiliary commands: the lot type / parish catalogue and an availability check."""

from __future__ import annotations

import typer
from rich.table import Table

from plansearch.entities.catalogue import LOT_TYPES, PARISHES
from plansearch.source import build_source

from .common import console, ensure_available, get_state


def catalogue_command() -> None:
    """List the lot types and parishes/settlements with their form ids."""

    lot_table = Table(title="Lot types")
    lot_table.add_column("Id", justify="right")
    lot_table.add_column("Lot type")
    for index, name in enumerate(LOT_TYPES, start=1):
        lot_table.add_row(str(index), name)

    parish_table = Table(title="Parishes / settlements")
    parish_table.add_column("Id", justify="right")
    parish_table.add_column("Parish")
    for index, name in enumerate(PARISHES, start=1):
        parish_table.add_row(str(index), name)

    console.print(lot_table)
    console.print(parish_table)


def check_command(ctx: typer.Context) -> None:
    """Check whether the registry search is currently available."""

    state = get_state(ctx)
    ensure_available(build_source(state.settings.policies))
    console.print("[bold green]✔[/bold green] Site is available")


__all__ = ["catalogue_command", "check_command"]

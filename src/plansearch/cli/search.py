"""Search commands: one lot number in one parish, or a sweep across many."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import typer
from rich.table import Table

from plansearch.entities.catalogue import LOT_TYPES, PARISHES, lot_type_id, parish_id, resolve_names
from plansearch.entities.core import LOT_NUMBER_HINT, Query, QueryValidationError, Record, validate_lot_number
from plansearch.export import default_filename, write_records
from plansearch.pipeline import Accumulator, all_records, fetch_records, sort_records
from plansearch.source import build_source
from plansearch.source.models import PlanSearchError
from plansearch.utils.logging import log_timing, logging_context

from .common import CLIError, CLIState, console, ensure_available, get_state, new_progress, resolve_path


def _lot_number_proc(value: str) -> str:
    try:
        return validate_lot_number(value)
    except QueryValidationError as exc:
        raise typer.BadParameter(LOT_NUMBER_HINT) from exc


def _menu_proc(options: Sequence[str], lookup: Callable[[str], int]) -> Callable[[str], str]:
    def _proc(value: str) -> str:
        text = value.strip()
        if text.isdigit() and 1 <= int(text) <= len(options):
            return options[int(text) - 1]
        try:
            return options[lookup(text) - 1]
        except KeyError as exc:
            raise typer.BadParameter(f"Choose a number between 1 and {len(options)} or a name") from exc

    return _proc


def _choose(title: str, options: Sequence[str], lookup: Callable[[str], int]) -> str:
    console.print(f"[bold]{title}[/bold]")
    for index, name in enumerate(options, start=1):
        console.print(f"  {index:>2}. {name}")
    return typer.prompt(title, value_proc=_menu_proc(options, lookup))


def _canonical(name: str, *, kind: str) -> str:
    try:
        return resolve_names([name], kind=kind)[0]
    except KeyError as exc:
        raise CLIError(str(exc.args[0])) from exc


def _save(
    state: CLIState,
    records: List[Record],
    destination: Path,
    *,
    include_lot: bool = False,
) -> Path | None:
    export = state.settings.policies.export
    if not records and export.skip_empty:
        console.print("[bold red]✖[/bold red] No results to save")
        return None
    written = write_records(
        sort_records(records),
        destination,
        include_lot=include_lot,
        encoding=export.encoding,
    )
    console.print(f'[bold green]✔[/bold green] Saved results to "{written.name}"', soft_wrap=True)
    return written


def search_command(
    ctx: typer.Context,
    lot: Optional[str] = typer.Option(None, "--lot", "-l", help="Lot number, range or list (e.g. 2, 1-7, 3,5,10)."),
    lot_type: Optional[str] = typer.Option(None, "--lot-type", "-t", help="Lot type name."),
    parish: Optional[str] = typer.Option(None, "--parish", "-p", help="Parish or settlement name."),
    with_lot: bool = typer.Option(False, "--with-lot", help="Keep the leading Lot column in the output."),
    output: Optional[Path] = typer.Option(None, "--output", help="Destination CSV file."),
    skip_check: bool = typer.Option(False, "--skip-check", help="Do not check site availability first."),
) -> None:
    """Search one lot number in one parish and save the plans to CSV.

    Any of ``--lot``, ``--lot-type`` or ``--parish`` that is missing is asked
    for interactively.
    """

    state = get_state(ctx)
    policies = state.settings.policies
    source = build_source(policies)
    if not skip_check:
        ensure_available(source)

    if lot is None:
        lot_number = typer.prompt("Which lot number(s)?", value_proc=_lot_number_proc)
    else:
        try:
            lot_number = validate_lot_number(lot)
        except QueryValidationError as exc:
            raise CLIError(str(exc)) from exc
    lot_type_name = (
        _canonical(lot_type, kind="lot type")
        if lot_type is not None
        else _choose("Which lot type?", LOT_TYPES, lot_type_id)
    )
    parish_name = (
        _canonical(parish, kind="parish")
        if parish is not None
        else _choose("Which parish/settlement?", PARISHES, parish_id)
    )

    query = Query(lot_number=lot_number, lot_type=lot_type_id(lot_type_name), parish=parish_id(parish_name))
    destination = (
        resolve_path(output, must_exist=False)
        if output is not None
        else state.settings.output_dir
        / default_filename(day=date.today(), lot_number=lot_number, lot_type=lot_type_name, parish=parish_name)
    )

    with logging_context(run_id=state.run_id, step="search"), log_timing("search"), new_progress() as progress:
        progress.report("Loading")
        try:
            result = fetch_records(
                query,
                source=source,
                progress=progress,
                accumulator=Accumulator.from_policy(policies.merge),
                retain_lot=with_lot,
            )
        except PlanSearchError as exc:
            raise CLIError(f"Search failed: {exc}") from exc

    _save(state, result.records, destination, include_lot=with_lot)


def sweep_command(
    ctx: typer.Context,
    lot: str = typer.Argument(..., help="Lot number, range or list (e.g. 2, 1-7, 3,5,10)."),
    lot_type: List[str] = typer.Option(  # noqa: B008 - Typer signature
        [], "--lot-type", "-t", help="Restrict to this lot type (repeatable); default is every lot type."
    ),
    parish: List[str] = typer.Option(  # noqa: B008 - Typer signature
        [], "--parish", "-p", help="Restrict to this parish (repeatable); default is every parish."
    ),
    output: Optional[Path] = typer.Option(None, "--output", help="Destination CSV file."),
    skip_check: bool = typer.Option(False, "--skip-check", help="Do not check site availability first."),
) -> None:
    """Search one lot number across every lot type and parish combination."""

    state = get_state(ctx)
    policies = state.settings.policies
    try:
        lot_number = validate_lot_number(lot)
    except QueryValidationError as exc:
        raise CLIError(str(exc)) from exc
    try:
        lot_types = resolve_names(lot_type or None, kind="lot type")
        parishes = resolve_names(parish or None, kind="parish")
    except KeyError as exc:
        raise CLIError(str(exc.args[0])) from exc

    source = build_source(policies)
    if not skip_check:
        ensure_available(source)

    destination = (
        resolve_path(output, must_exist=False)
        if output is not None
        else state.settings.output_dir / default_filename(day=date.today())
    )

    with logging_context(run_id=state.run_id, step="sweep"), log_timing("sweep"), new_progress() as progress:
        result = all_records(
            lot_number,
            lot_types,
            parishes,
            source=source,
            progress=progress,
            policy=policies.aggregation,
            merge_policy=policies.merge,
        )

    _save(state, result.records, destination)

    if result.failed:
        table = Table(title="Failed searches")
        table.add_column("Lot type")
        table.add_column("Parish")
        table.add_column("Error")
        for cell in result.failures:
            table.add_row(cell.lot_type, cell.parish, cell.error or "")
        console.print(table)
        raise typer.Exit(code=1)


__all__ = ["search_command", "sweep_command"]

"""Command-line interface for gridcalc."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
import yaml

from gridcalc import __version__


@click.group()
@click.version_option(version=__version__, prog_name="gridcalc")
def main() -> None:
    """gridcalc -- evaluate spreadsheet formulas and render grids."""


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _load_mapping(path: str) -> dict[str, Any]:
    """Read a YAML (or JSON) file holding a ``{ref: value}`` mapping."""
    data = yaml.safe_load(Path(path).read_text()) or {}
    if not isinstance(data, dict):
        raise click.ClickException(f"{path} must contain a mapping of cell references")
    return data


def _parse_cells(items: tuple[str, ...]) -> dict[str, str]:
    cells: dict[str, str] = {}
    for item in items:
        if "=" not in item:
            raise click.ClickException(f"Invalid --cell format: {item!r}. Use REF=VALUE.")
        k, v = item.split("=", 1)
        cells[k.strip().upper()] = v
    return cells


# ---------------------------------------------------------------------------
# Eval
# ---------------------------------------------------------------------------


@main.command("eval")
@click.argument("formula")
@click.option("--cell", "cells", multiple=True, help="Cell value as REF=VALUE.")
@click.option("--cells", "cells_file", default=None, type=click.Path(exists=True), help="YAML/JSON mapping of cell values.")
def eval_cmd(formula: str, cells: tuple[str, ...], cells_file: str | None) -> None:
    """Evaluate FORMULA against the given cell values."""
    from gridcalc.formulas import evaluate

    snapshot: dict[str, str] = {}
    if cells_file:
        snapshot.update({str(k).strip().upper(): "" if v is None else str(v) for k, v in _load_mapping(cells_file).items()})
    snapshot.update(_parse_cells(cells))
    click.echo(evaluate(formula, snapshot))


# ---------------------------------------------------------------------------
# Sheet
# ---------------------------------------------------------------------------


@main.command()
@click.argument("file", type=click.Path(exists=True))
@click.option("--project", "project_dir", default=None, type=click.Path(file_okay=False), help="Project directory for config and activity logs.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--csv", "as_csv", is_flag=True, help="Output the display grid as CSV.")
def sheet(file: str, project_dir: str | None, as_json: bool, as_csv: bool) -> None:
    """Apply the cell inputs in FILE and print the resulting grid."""
    from gridcalc.logging.events import EventType, emit_info, set_project_dir
    from gridcalc.project import DEFAULT_CONFIG, load_project_config
    from gridcalc.sheet import Sheet, SheetError

    config = dict(DEFAULT_CONFIG)
    sheet_id = Path(file).stem
    if project_dir:
        try:
            config = load_project_config(Path(project_dir))
        except ValueError as e:
            raise click.ClickException(str(e))
        set_project_dir(project_dir)

    entries = _load_mapping(file)
    try:
        grid = Sheet.from_entries(entries, rows=config["rows"], cols=config["cols"], sheet_id=sheet_id)
    except SheetError as e:
        raise click.ClickException(str(e))
    emit_info(
        EventType.sheet_loaded,
        f"Loaded {len(entries)} cell(s) from {file}",
        {"sheet_id": sheet_id, "cells": len(entries)},
    )

    if as_csv:
        click.echo(grid.to_csv())
        return

    if as_json:
        click.echo(json.dumps({
            "columns": grid.column_labels(),
            "values": grid.snapshot(),
        }, indent=2, sort_keys=True))
        return

    click.echo("\t" + "\t".join(grid.column_labels()))
    for i, row in enumerate(grid.to_rows()):
        click.echo(f"{i + 1}\t" + "\t".join(row))


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def _echo_events(events: list[dict[str, Any]]) -> None:
    for evt in events:
        ts = evt.get("ts", "")
        lvl = evt.get("level", "").upper()
        etype = evt.get("event_type", "")
        msg = evt.get("message", "")
        err = evt.get("error_code")
        line = f"[{ts}] {lvl:7s} {etype}: {msg}"
        if err:
            line += f"  ({err})"
        click.echo(line)


@main.command("events")
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--level", default=None, type=click.Choice(["info", "warning", "error"]), help="Filter by level.")
@click.option("--type", "event_type", default=None, help="Filter by event type.")
@click.option("--ref", default=None, help="Filter by cell reference.")
@click.option("--limit", default=100, type=int, help="Maximum events to show.")
def events_cmd(
    directory: str,
    level: str | None,
    event_type: str | None,
    ref: str | None,
    limit: int,
) -> None:
    """Show the activity event log for project DIRECTORY, newest first."""
    from gridcalc.logging.sink import EventSink

    sink = EventSink(Path(directory))
    events = sink.read_global(
        level=level,
        event_type=event_type,
        ref=ref.upper() if ref else None,
        limit=limit,
    )

    if not events:
        click.echo("No events found.")
        return
    _echo_events(events)


@main.command("sheet-log")
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.argument("sheet_id")
def sheet_log_cmd(directory: str, sheet_id: str) -> None:
    """Show the event log for one sheet, oldest first."""
    from gridcalc.logging.sink import EventSink

    events = EventSink(Path(directory)).read_sheet_log(sheet_id)

    if not events:
        click.echo(f"No events found for sheet {sheet_id}.")
        return
    _echo_events(events)

"""Lookup formula function: VLOOKUP."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from gridcalc.formulas.errors import NOT_AVAILABLE, FormulaFunctionError
from gridcalc.formulas.numbers import parse_int
from gridcalc.formulas.parser import read_args
from gridcalc.formulas.refs import resolve_scalar, snapshot_refs, split_bound


def _fn_vlookup(rest: str, snapshot: Mapping[str, str]) -> str | None:
    """VLOOKUP(value, A1:B10, column): exact match down the first column.

    Scans rows from the range's start row to its end row in the start
    column.  On the first cell equal to *value* returns the cell
    *column* - 1 columns to the right on that row (``""`` if empty).
    Returns ``#N/A`` when nothing matches or the range has no ``:``.
    """
    args = read_args(rest, 3)
    if args is None:
        return None
    lookup_value = resolve_scalar(args[0], snapshot).upper()
    cell_range = args[1].strip()
    col_offset = parse_int(args[2].strip())

    if ":" not in cell_range:
        return NOT_AVAILABLE

    parts = cell_range.split(":")
    lo = split_bound(parts[0])
    hi = split_bound(parts[1])
    if lo is None or hi is None or lo[1] is None or hi[1] is None:
        return NOT_AVAILABLE
    start_col, start_row = lo
    end_row = hi[1]

    for ref in snapshot_refs(start_col, start_col, start_row, end_row, snapshot):
        row = ref[1:]
        cell = snapshot.get(ref)
        if cell is None or cell.upper() != lookup_value:
            continue
        if col_offset is None:
            raise FormulaFunctionError(
                "VLOOKUP", f"VLOOKUP: invalid column offset {args[2].strip()!r}"
            )
        return snapshot.get(f"{chr(start_col + col_offset - 1)}{row}") or ""

    return NOT_AVAILABLE


LOOKUP_FUNCTIONS: dict[str, Any] = {
    "VLOOKUP": _fn_vlookup,
}

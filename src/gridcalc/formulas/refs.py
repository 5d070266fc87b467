"""Cell references, ranges and operand-list resolution.

A cell reference is a single column letter followed by a 1-based row,
e.g. ``B12``.  Ranges (``A1:B3``) iterate column-major: every row of the
first column, then every row of the next.  Bounds are used as written;
a start past its end simply yields nothing.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping

from gridcalc.formulas.numbers import parse_int

CELL_REF_RE = re.compile(r"^[A-Z][0-9]+\Z")

MAX_COLUMNS = 26


def is_cell_ref(text: str) -> bool:
    """True if *text* is exactly one column letter followed by digits."""
    return bool(CELL_REF_RE.match(text))


def col_letter(idx: int) -> str:
    """Convert a 0-based column index to its letter.  0=A, 25=Z."""
    if idx < 0 or idx >= MAX_COLUMNS:
        raise ValueError(f"Column index out of range: {idx}")
    return chr(ord("A") + idx)


def make_ref(row: int, col: int) -> str:
    """Build a cell reference from 0-based row/col."""
    return f"{col_letter(col)}{row + 1}"


def parse_ref(ref: str) -> tuple[int, int]:
    """Parse ``'A1'`` -> ``(row_0based, col_0based)``.

    Raises ValueError on a bad reference.
    """
    ref = ref.strip().upper()
    if not is_cell_ref(ref):
        raise ValueError(f"Invalid cell reference: {ref!r}")
    return int(ref[1:]) - 1, ord(ref[0]) - ord("A")


def split_bound(bound: str) -> tuple[int, int | None] | None:
    """Split one range bound into ``(column_code, row)``.

    The column is the character code of the first character and the row
    the leading integer of the remainder (``None`` if there is none).
    Returns ``None`` for an empty bound.
    """
    if not bound:
        return None
    return ord(bound[0]), parse_int(bound[1:])


def _range_bounds(start: str, end: str) -> tuple[int, int, int, int] | None:
    lo = split_bound(start)
    hi = split_bound(end)
    if lo is None or hi is None:
        return None
    start_col, start_row = lo
    end_col, end_row = hi
    if start_row is None or end_row is None:
        return None
    return start_col, end_col, start_row, end_row


def _walk(start_col: int, end_col: int, start_row: int, end_row: int) -> Iterator[str]:
    for col in range(start_col, end_col + 1):
        for row in range(start_row, end_row + 1):
            yield f"{chr(col)}{row}"


def expand_range(start: str, end: str) -> list[str]:
    """Expand ``start:end`` into cell references, column-major."""
    bounds = _range_bounds(start, end)
    return [] if bounds is None else list(_walk(*bounds))


def snapshot_refs(
    start_col: int,
    end_col: int,
    start_row: int,
    end_row: int,
    snapshot: Mapping[str, str],
) -> Iterable[str]:
    """Column-major references inside the given bounds, for reading *snapshot*.

    When the bounds cover more cells than the snapshot holds, the snapshot
    keys are filtered and ordered instead of walking every cell.
    """
    size = max(0, end_col - start_col + 1) * max(0, end_row - start_row + 1)
    if size <= len(snapshot):
        return _walk(start_col, end_col, start_row, end_row)

    found: list[tuple[int, int, str]] = []
    for key in snapshot:
        if not key:
            continue
        row_text = key[1:]
        try:
            row = int(row_text)
        except ValueError:
            continue
        if str(row) != row_text:
            continue
        col = ord(key[0])
        if start_col <= col <= end_col and start_row <= row <= end_row:
            found.append((col, row, key))
    found.sort()
    return [key for _, _, key in found]


def resolve_operands(operand: str, snapshot: Mapping[str, str]) -> list[str]:
    """Resolve a range or comma list into the values it covers.

    Cells that are absent or empty contribute nothing.  An operand that is
    neither a list nor a range resolves to an empty list.
    """
    if "," in operand:
        refs: Iterable[str] = [token.strip() for token in operand.split(",")]
    elif ":" in operand:
        parts = operand.split(":")
        bounds = _range_bounds(parts[0], parts[1])
        if bounds is None:
            return []
        refs = snapshot_refs(*bounds, snapshot)
    else:
        return []
    return [snapshot[ref] for ref in refs if snapshot.get(ref)]


def resolve_scalar(token: str, snapshot: Mapping[str, str]) -> str:
    """Resolve a single function argument to its text.

    A cell reference reads the snapshot (empty if absent), a double-quoted
    literal is unquoted, anything else is returned trimmed.
    """
    token = token.strip()
    if is_cell_ref(token):
        return snapshot.get(token) or ""
    return unquote(token)


def unquote(token: str) -> str:
    """Strip one pair of surrounding double quotes, if present."""
    if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
        return token[1:-1]
    return token

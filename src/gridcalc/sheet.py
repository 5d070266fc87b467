"""In-memory spreadsheet grid.

A :class:`Sheet` stores cells by 0-based ``(row, col)`` and evaluates
formula input at edit time against a fresh snapshot of every displayed
value.  Results are stored, not recalculated: editing ``A1`` does not
refresh a formula in ``B1`` that read it.
"""

from __future__ import annotations

import functools
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from gridcalc.formulas import SENTINELS, evaluate
from gridcalc.formulas.errors import NOT_AVAILABLE
from gridcalc.formulas.numbers import is_number, parse_float
from gridcalc.formulas.refs import MAX_COLUMNS, col_letter, make_ref, parse_ref
from gridcalc.logging.events import (
    FORMULA_EVAL_ERROR,
    LOOKUP_NOT_FOUND,
    EventLevel,
    EventType,
    emit,
    make_cell_event,
)


class SheetError(Exception):
    """Invalid operation on a sheet (bad coordinates, empty comment)."""


@dataclass
class Comment:
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    )


@dataclass
class Cell:
    value: str = ""
    formula: str | None = None
    comments: list[Comment] = field(default_factory=list)


class Sheet:
    """A rows x cols grid of cells with edit-time formula evaluation.

    Usage::

        sheet = Sheet(rows=5, cols=3)
        sheet.set_value("A1", "2")
        sheet.set_value("A2", "3")
        sheet.set_value("A3", "=SUM(A1:A2)")
        sheet.get_value("A3")  # "5"
    """

    def __init__(self, rows: int = 20, cols: int = 10, sheet_id: str | None = None) -> None:
        if rows < 1:
            raise SheetError(f"rows must be positive, got {rows}")
        if not 1 <= cols <= MAX_COLUMNS:
            raise SheetError(f"cols must be between 1 and {MAX_COLUMNS}, got {cols}")
        self.rows = rows
        self.cols = cols
        self.sheet_id = sheet_id
        self._cells: dict[tuple[int, int], Cell] = {}

    @classmethod
    def from_entries(
        cls,
        entries: dict[str, Any],
        rows: int = 20,
        cols: int = 10,
        sheet_id: str | None = None,
    ) -> Sheet:
        """Build a sheet by applying ``{ref: raw}`` entries in order."""
        sheet = cls(rows=rows, cols=cols, sheet_id=sheet_id)
        for ref, raw in entries.items():
            sheet.set_value(str(ref), "" if raw is None else str(raw))
        return sheet

    # ------------------------------------------------------------------
    # Addressing
    # ------------------------------------------------------------------

    def column_labels(self) -> list[str]:
        return [col_letter(c) for c in range(self.cols)]

    def _check_bounds(self, row: int, col: int) -> None:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise SheetError(
                f"Cell ({row}, {col}) is outside the {self.rows}x{self.cols} grid"
            )

    def _locate(self, ref: str) -> tuple[int, int]:
        try:
            return parse_ref(ref)
        except ValueError as exc:
            raise SheetError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> dict[str, str]:
        """Return the current display value of every stored cell by reference."""
        return {make_ref(r, c): cell.value for (r, c), cell in self._cells.items()}

    def get_cell(self, row: int, col: int) -> Cell | None:
        self._check_bounds(row, col)
        return self._cells.get((row, col))

    def get_value(self, ref: str) -> str:
        """Display value at *ref*, ``""`` for an empty cell."""
        cell = self.get_cell(*self._locate(ref))
        return cell.value if cell else ""

    def to_rows(self) -> list[list[str]]:
        """The display grid as a list of rows."""
        grid = [[""] * self.cols for _ in range(self.rows)]
        for (r, c), cell in self._cells.items():
            grid[r][c] = cell.value
        return grid

    def sorted_column(self, col: int, descending: bool = False) -> list[tuple[int, str]]:
        """Order the rows of column *col* by value.

        Two values that both read as numbers compare numerically; any other
        pair compares as text, ignoring case first and putting lowercase
        ahead of uppercase on a tie.  Returns ``(row, value)`` pairs.
        """
        self._check_bounds(0, col)
        column = [(r, self._cells[(r, col)].value if (r, col) in self._cells else "")
                  for r in range(self.rows)]

        def _cmp(a: tuple[int, str], b: tuple[int, str]) -> int:
            a_num, b_num = parse_float(a[1]), parse_float(b[1])
            if is_number(a_num) and is_number(b_num):
                diff = a_num - b_num
            else:
                a_key, b_key = _text_key(a[1]), _text_key(b[1])
                diff = (a_key > b_key) - (a_key < b_key)
            return _sign(-diff if descending else diff)

        return sorted(column, key=functools.cmp_to_key(_cmp))

    def to_csv(self) -> str:
        """The display grid as CSV text.

        Every field is double-quoted with embedded quotes doubled; rows are
        separated by newlines with no trailing newline.
        """
        return "\n".join(
            ",".join('"' + value.replace('"', '""') + '"' for value in row)
            for row in self.to_rows()
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_cell(self, row: int, col: int, raw: str) -> Cell:
        """Store user input at ``(row, col)``.

        Formula input (``=...``) is evaluated against the current snapshot;
        the display value and the raw formula are both kept.
        """
        self._check_bounds(row, col)
        is_formula = raw.startswith("=")
        value = evaluate(raw, self.snapshot()) if is_formula else raw

        cell = self._cells.setdefault((row, col), Cell())
        old_value = cell.value
        cell.value = value
        cell.formula = raw if is_formula else None

        ref = make_ref(row, col)
        emit(make_cell_event(
            EventType.cell_updated,
            EventLevel.info,
            f"{ref} updated",
            ref=ref,
            sheet_id=self.sheet_id,
            old_value=old_value,
            new_value=value,
            extra={"formula": cell.formula} if is_formula else None,
        ))
        if is_formula and value in SENTINELS:
            emit(make_cell_event(
                EventType.formula_error,
                EventLevel.warning,
                f"{ref}: {raw} evaluated to {value}",
                ref=ref,
                sheet_id=self.sheet_id,
                error_code=LOOKUP_NOT_FOUND if value == NOT_AVAILABLE else FORMULA_EVAL_ERROR,
                extra={"formula": raw},
            ))
        return cell

    def set_value(self, ref: str, raw: str) -> Cell:
        return self.set_cell(*self._locate(ref), raw)

    def add_comment(self, row: int, col: int, text: str) -> Comment:
        """Attach a comment to a cell, creating an empty cell if needed."""
        self._check_bounds(row, col)
        text = text.strip()
        if not text:
            raise SheetError("Comment text must not be empty")
        comment = Comment(text=text)
        self._cells.setdefault((row, col), Cell()).comments.append(comment)

        ref = make_ref(row, col)
        emit(make_cell_event(
            EventType.comment_added,
            EventLevel.info,
            f"Comment added to {ref}",
            ref=ref,
            sheet_id=self.sheet_id,
            extra={"comment_id": comment.id},
        ))
        return comment


def _sign(x: float) -> int:
    return (x > 0) - (x < 0)


def _text_key(text: str) -> tuple[str, str]:
    return text.casefold(), text.swapcase()

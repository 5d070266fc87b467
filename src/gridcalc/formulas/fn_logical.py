"""Logical formula function: IF."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from gridcalc.formulas.numbers import parse_float
from gridcalc.formulas.parser import read_args
from gridcalc.formulas.refs import resolve_scalar, unquote

# Checked in this order; ``A1>=A2`` therefore compares A1 against "=A2".
_OPERATORS = (">", "<", "=")


def _compare(condition: str, snapshot: Mapping[str, str]) -> bool | None:
    """Evaluate a single ``left OP right`` comparison, or ``None`` if no operator."""
    for op in _OPERATORS:
        if op not in condition:
            continue
        parts = condition.split(op)
        left = resolve_scalar(parts[0], snapshot)
        right = resolve_scalar(parts[1], snapshot)
        if op == ">":
            return parse_float(left) > parse_float(right)
        if op == "<":
            return parse_float(left) < parse_float(right)
        return left.strip().upper() == right.strip().upper()
    return None


def _fn_if(rest: str, snapshot: Mapping[str, str]) -> str | None:
    """IF(condition, then_text, else_text): returns branch text, unevaluated.

    ``>`` and ``<`` compare numerically (a non-number compares false);
    ``=`` compares text.
    """
    args = read_args(rest, 3)
    if args is None:
        return None
    condition, then_text, else_text = (a.strip() for a in args)
    result = _compare(condition, snapshot)
    if result is None:
        return None
    return unquote(then_text) if result else unquote(else_text)


LOGICAL_FUNCTIONS: dict[str, Any] = {
    "IF": _fn_if,
}

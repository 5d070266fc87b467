"""Aggregate formula functions: SUM, AVERAGE, COUNT, MIN, MAX, PRODUCT.

Each takes one operand, a range (``A1:A10``) or a comma list
(``A1,B2,C3``).  SUM, AVERAGE and PRODUCT read non-numeric values as 0;
MIN and MAX drop them instead.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from gridcalc.formulas.numbers import format_number, is_number, parse_float
from gridcalc.formulas.parser import read_args
from gridcalc.formulas.refs import resolve_operands


def _operand_values(rest: str, snapshot: Mapping[str, str]) -> list[str] | None:
    args = read_args(rest, 1)
    if not args or not args[0]:
        return None
    return resolve_operands(args[0], snapshot)


def _as_number_or_zero(value: str) -> float:
    number = parse_float(value)
    return number if is_number(number) else 0.0


def _numeric_only(values: list[str]) -> list[float]:
    return [n for n in (parse_float(v) for v in values) if is_number(n)]


def _fn_sum(rest: str, snapshot: Mapping[str, str]) -> str | None:
    values = _operand_values(rest, snapshot)
    if values is None:
        return None
    total = 0.0
    for value in values:
        total += _as_number_or_zero(value)
    return format_number(total)


def _fn_average(rest: str, snapshot: Mapping[str, str]) -> str | None:
    """AVERAGE(range): the count includes non-numeric values."""
    values = _operand_values(rest, snapshot)
    if values is None:
        return None
    if not values:
        return format_number(math.nan)
    total = 0.0
    for value in values:
        total += _as_number_or_zero(value)
    return format_number(total / len(values))


def _fn_count(rest: str, snapshot: Mapping[str, str]) -> str | None:
    """COUNT(range): counts non-blank values, numeric or not."""
    values = _operand_values(rest, snapshot)
    if values is None:
        return None
    return str(sum(1 for v in values if v.strip() != ""))


def _fn_min(rest: str, snapshot: Mapping[str, str]) -> str | None:
    values = _operand_values(rest, snapshot)
    if values is None:
        return None
    numbers = _numeric_only(values)
    if not numbers:
        return "0"
    return format_number(min(numbers))


def _fn_max(rest: str, snapshot: Mapping[str, str]) -> str | None:
    values = _operand_values(rest, snapshot)
    if values is None:
        return None
    numbers = _numeric_only(values)
    if not numbers:
        return "0"
    return format_number(max(numbers))


def _fn_product(rest: str, snapshot: Mapping[str, str]) -> str | None:
    """PRODUCT(range): a single non-numeric value zeroes the result."""
    values = _operand_values(rest, snapshot)
    if values is None:
        return None
    product = 1.0
    for value in values:
        product *= _as_number_or_zero(value)
    return format_number(product)


AGGREGATE_FUNCTIONS: dict[str, Any] = {
    "SUM": _fn_sum,
    "AVERAGE": _fn_average,
    "AVG": _fn_average,
    "COUNT": _fn_count,
    "MIN": _fn_min,
    "MAX": _fn_max,
    "PRODUCT": _fn_product,
}

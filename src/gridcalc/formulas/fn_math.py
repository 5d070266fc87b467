"""Scalar math formula functions: ROUND, ABS, SQRT, POWER, MOD, CEILING, FLOOR.

Arguments are single values, not ranges.  A cell reference argument is
read from the snapshot first.  When an argument is not numeric (or SQRT
is given a negative number, or MOD a zero divisor) the function does not
match and the formula falls through to the remaining evaluation steps.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from gridcalc.formulas.errors import FormulaFunctionError
from gridcalc.formulas.numbers import (
    format_fixed,
    format_number,
    is_number,
    parse_float,
    parse_int,
)
from gridcalc.formulas.parser import read_args
from gridcalc.formulas.refs import resolve_scalar


def _numeric_args(
    rest: str, snapshot: Mapping[str, str], count: int
) -> list[float] | None:
    """Read *count* numeric arguments, or ``None`` if any is not a number."""
    args = read_args(rest, count)
    if args is None:
        return None
    numbers = [parse_float(resolve_scalar(a, snapshot)) for a in args]
    if not all(is_number(n) for n in numbers):
        return None
    return numbers


def _fn_round(rest: str, snapshot: Mapping[str, str]) -> str | None:
    """ROUND(value, decimals): fixed-point text with *decimals* digits."""
    args = read_args(rest, 2)
    if args is None:
        return None
    value = parse_float(resolve_scalar(args[0], snapshot))
    decimals = parse_int(resolve_scalar(args[1], snapshot))
    if not is_number(value) or decimals is None:
        return None
    try:
        return format_fixed(value, decimals)
    except ValueError as exc:
        raise FormulaFunctionError("ROUND", f"ROUND: {exc}") from exc


def _fn_abs(rest: str, snapshot: Mapping[str, str]) -> str | None:
    numbers = _numeric_args(rest, snapshot, 1)
    if numbers is None:
        return None
    return format_number(abs(numbers[0]))


def _fn_sqrt(rest: str, snapshot: Mapping[str, str]) -> str | None:
    numbers = _numeric_args(rest, snapshot, 1)
    if numbers is None or numbers[0] < 0:
        return None
    return format_number(math.sqrt(numbers[0]))


def _odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and x % 2 == 1


def _power(base: float, exponent: float) -> float:
    """``base ** exponent`` with IEEE results instead of exceptions.

    Overflow gives a signed infinity, a zero base with a negative exponent
    gives infinity, and any other domain failure gives NaN.  ``1`` or
    ``-1`` raised to an infinite power is NaN.
    """
    if abs(base) == 1 and math.isinf(exponent):
        return math.nan
    try:
        return math.pow(base, exponent)
    except OverflowError:
        negative = base < 0 and _odd_integer(exponent)
        return -math.inf if negative else math.inf
    except ValueError:
        if base == 0 and exponent < 0:
            negative = math.copysign(1.0, base) < 0 and _odd_integer(exponent)
            return -math.inf if negative else math.inf
        return math.nan


def _fn_power(rest: str, snapshot: Mapping[str, str]) -> str | None:
    numbers = _numeric_args(rest, snapshot, 2)
    if numbers is None:
        return None
    base, exponent = numbers
    return format_number(_power(base, exponent))


def _fn_mod(rest: str, snapshot: Mapping[str, str]) -> str | None:
    """MOD(dividend, divisor): remainder takes the sign of the dividend."""
    numbers = _numeric_args(rest, snapshot, 2)
    if numbers is None or numbers[1] == 0:
        return None
    dividend, divisor = numbers
    if math.isinf(dividend):
        return format_number(math.nan)
    return format_number(math.fmod(dividend, divisor))


def _fn_ceiling(rest: str, snapshot: Mapping[str, str]) -> str | None:
    numbers = _numeric_args(rest, snapshot, 1)
    if numbers is None:
        return None
    value = numbers[0]
    if not math.isfinite(value):
        return format_number(value)
    return format_number(math.ceil(value))


def _fn_floor(rest: str, snapshot: Mapping[str, str]) -> str | None:
    numbers = _numeric_args(rest, snapshot, 1)
    if numbers is None:
        return None
    value = numbers[0]
    if not math.isfinite(value):
        return format_number(value)
    return format_number(math.floor(value))


MATH_FUNCTIONS: dict[str, Any] = {
    "ROUND": _fn_round,
    "ABS": _fn_abs,
    "SQRT": _fn_sqrt,
    "POWER": _fn_power,
    "MOD": _fn_mod,
    "CEILING": _fn_ceiling,
    "FLOOR": _fn_floor,
}

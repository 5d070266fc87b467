"""Numeric coercion and display formatting for cell values.

Cell values travel as display strings.  Coercion is lenient the way a
browser grid reads them: the longest leading numeric literal wins and any
trailing text is ignored (``"12px"`` reads as 12).  Results are rendered
back in the shortest round-tripping form, without a trailing ``.0`` on
integral values.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal

_FLOAT_PREFIX_RE = re.compile(
    r"^\s*([+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?))"
)
_INT_PREFIX_RE = re.compile(r"^\s*([+-]?[0-9]+)")

# Above this magnitude integral values switch to exponent notation.
_EXPONENT_UPPER = 21
# At or below this decimal position small values switch to exponent notation.
_EXPONENT_LOWER = -6

_FIXED_CONTEXT = Context(prec=500)


def parse_float(text: str) -> float:
    """Read the leading floating-point literal of *text*.

    Returns:
        The parsed value, or ``nan`` when *text* has no numeric prefix.
    """
    m = _FLOAT_PREFIX_RE.match(text)
    if not m:
        return math.nan
    return float(m.group(1).replace("Infinity", "inf"))


def parse_int(text: str) -> int | None:
    """Read the leading integer literal of *text*, or ``None``."""
    m = _INT_PREFIX_RE.match(text)
    if not m:
        return None
    return int(m.group(1))


def is_number(value: float) -> bool:
    """True unless *value* is NaN."""
    return not math.isnan(value)


def format_number(value: float) -> str:
    """Render a number as a display string.

    ``11.0`` -> ``"11"``, ``0.5`` -> ``"0.5"``, ``1e21`` -> ``"1e+21"``,
    ``1e-7`` -> ``"1e-7"``; NaN and infinities render as ``NaN``,
    ``Infinity`` and ``-Infinity``.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    k = len(digits)
    # Decimal point position: value == 0.<digits> * 10**n
    n = k + exponent

    if k <= n <= _EXPONENT_UPPER:
        return sign + digits + "0" * (n - k)
    if 0 < n <= _EXPONENT_UPPER:
        return sign + digits[:n] + "." + digits[n:]
    if _EXPONENT_LOWER < n <= 0:
        return sign + "0." + "0" * (-n) + digits

    e = n - 1
    e_text = f"e{'+' if e > 0 else '-'}{abs(e)}"
    if k == 1:
        return sign + digits + e_text
    return sign + digits[0] + "." + digits[1:] + e_text


def format_fixed(value: float, decimals: int) -> str:
    """Render *value* with exactly *decimals* fractional digits.

    Raises:
        ValueError: If *decimals* is outside 0..100.
    """
    if decimals < 0 or decimals > 100:
        raise ValueError(f"decimals must be between 0 and 100, got {decimals}")
    if not math.isfinite(value):
        return format_number(value)
    if value == 0:
        value = 0.0
    # Exact binary value, ties away from zero
    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=_FIXED_CONTEXT)
    return format(rounded, "f")

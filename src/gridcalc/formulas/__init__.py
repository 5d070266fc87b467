"""Spreadsheet formula evaluation over a snapshot of cell values.

Public API::

    from gridcalc.formulas import evaluate, ERROR, NOT_AVAILABLE
"""

from gridcalc.formulas.errors import (
    ERROR,
    NOT_AVAILABLE,
    SENTINELS,
    FormulaError,
    FormulaFunctionError,
    FormulaParseError,
)
from gridcalc.formulas.evaluator import evaluate
from gridcalc.formulas.numbers import format_number, parse_float
from gridcalc.formulas.parser import evaluate_arithmetic, parse_arithmetic
from gridcalc.formulas.refs import make_ref, parse_ref, resolve_operands

__all__ = [
    "ERROR",
    "NOT_AVAILABLE",
    "SENTINELS",
    "FormulaError",
    "FormulaFunctionError",
    "FormulaParseError",
    "evaluate",
    "evaluate_arithmetic",
    "format_number",
    "make_ref",
    "parse_arithmetic",
    "parse_float",
    "parse_ref",
    "resolve_operands",
]

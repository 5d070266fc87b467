"""Formula evaluation against a snapshot of displayed cell values.

Evaluation order for a formula body (text after ``=``, uppercased):

1. A leading ``NAME(`` selects a function from the dispatch table.  A
   handler that does not match its arguments returns ``None`` and
   evaluation continues below.
2. Pure arithmetic (digits, whitespace, ``+ - * / ( ) .``) is parsed and
   computed.
3. A single cell reference returns that cell's value.
4. Anything else is returned exactly as the caller wrote it.

Any error along the way yields ``#ERROR``.  The evaluator never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from gridcalc.formulas.errors import ERROR
from gridcalc.formulas.fn_aggregate import AGGREGATE_FUNCTIONS
from gridcalc.formulas.fn_logical import LOGICAL_FUNCTIONS
from gridcalc.formulas.fn_lookup import LOOKUP_FUNCTIONS
from gridcalc.formulas.fn_math import MATH_FUNCTIONS
from gridcalc.formulas.numbers import format_number
from gridcalc.formulas.parser import (
    evaluate_arithmetic,
    is_arithmetic,
    parse_arithmetic,
    split_call,
)
from gridcalc.formulas.refs import is_cell_ref

logger = logging.getLogger(__name__)


def evaluate(formula: str, snapshot: Mapping[str, str]) -> str:
    """Compute the display value of *formula*.

    Args:
        formula: Raw cell input.  Text not starting with ``=`` is returned
            unchanged.
        snapshot: Current display value per cell reference (``"A1"``).
            Never modified.

    Returns:
        The display string; ``#ERROR`` on failure, ``#N/A`` when VLOOKUP
        finds no match.
    """
    if not formula or not formula.startswith("="):
        return formula

    content = formula[1:].upper()
    try:
        result = _evaluate_content(content, snapshot)
    except Exception:
        logger.debug("formula %r failed", formula, exc_info=True)
        return ERROR
    return formula if result is None else result


def _evaluate_content(content: str, snapshot: Mapping[str, str]) -> str | None:
    """Evaluate an uppercased formula body; ``None`` means pass through."""
    call = split_call(content)
    if call is not None:
        name, rest = call
        handler = _FUNC_TABLE.get(name)
        if handler is not None:
            result = handler(rest, snapshot)
            if result is not None:
                return result

    if is_arithmetic(content):
        tree = parse_arithmetic(content)
        return format_number(evaluate_arithmetic(tree))

    if is_cell_ref(content):
        return snapshot.get(content) or ""

    return None


_FUNC_TABLE: dict[str, Any] = {
    **AGGREGATE_FUNCTIONS,
    **MATH_FUNCTIONS,
    **LOGICAL_FUNCTIONS,
    **LOOKUP_FUNCTIONS,
}

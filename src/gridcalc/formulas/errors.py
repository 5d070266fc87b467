"""Error types and display sentinels for formula evaluation.

None of these exceptions escape :func:`gridcalc.formulas.evaluate`; they
are raised internally and converted to :data:`ERROR` at the boundary.
"""

from __future__ import annotations

# Reserved display values returned by the evaluator.
ERROR = "#ERROR"
NOT_AVAILABLE = "#N/A"

SENTINELS = frozenset({ERROR, NOT_AVAILABLE})


class FormulaError(Exception):
    """Base class for all formula-related errors."""


class FormulaParseError(FormulaError):
    """Syntax error in an arithmetic expression.

    Attributes:
        position: Character position where the error was detected.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        self.position = position
        full = f"Formula parse error: {message}"
        if position is not None:
            full += f" (at position {position})"
        super().__init__(full)


class FormulaFunctionError(FormulaError):
    """A function matched but could not produce a value.

    Attributes:
        func_name: The function that caused the error.
    """

    def __init__(self, func_name: str, message: str | None = None) -> None:
        self.func_name = func_name
        msg = message or f"Function failed: {func_name!r}"
        super().__init__(msg)

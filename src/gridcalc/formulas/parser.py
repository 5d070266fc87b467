"""Lark-based parser for the arithmetic sub-language and call splitting.

Arithmetic formulas may only contain digits, whitespace, ``.`` and the
operators ``+ - * / ( )``.  Anything else (letters in particular) is
rejected before parsing, so function names and cell references never
reach the grammar.
"""

from __future__ import annotations

import re

from lark import Lark, Token, Tree
from lark.exceptions import LarkError

from gridcalc.formulas.errors import FormulaError, FormulaParseError

# LALR(1) grammar for plain arithmetic.
# Operator precedence (lowest to highest):
#   1. Addition/subtraction: + -
#   2. Multiplication/division: * /
#   3. Unary plus/minus: + -
#   4. Atoms: number, parenthesized expr
GRAMMAR = r"""
?start: addition

?addition: multiplication
    | addition "+" multiplication  -> add
    | addition "-" multiplication  -> sub

?multiplication: unary
    | multiplication "*" unary  -> mul
    | multiplication "/" unary  -> div

?unary: atom
    | "-" unary  -> neg
    | "+" unary  -> pos

?atom: NUMBER       -> number
    | "(" addition ")"

NUMBER: /[0-9]+\.?[0-9]*|\.[0-9]+/

%import common.WS
%ignore WS
"""

_parser = Lark(GRAMMAR, parser="lalr", start="start")

ARITHMETIC_RE = re.compile(r"^[0-9\s+\-*/().]+$")

# ``NAME(`` at the start of the formula body selects a function handler.
CALL_RE = re.compile(r"^([A-Z]+)\(")


def is_arithmetic(content: str) -> bool:
    """True if *content* uses only arithmetic characters."""
    return bool(ARITHMETIC_RE.match(content))


def parse_arithmetic(content: str) -> Tree:
    """Parse an arithmetic expression into a Lark Tree.

    Args:
        content: Expression text without the leading ``=``, e.g. ``"5+3*2"``.

    Raises:
        FormulaParseError: If the expression has invalid syntax.
    """
    try:
        return _parser.parse(content)
    except LarkError as exc:
        pos = getattr(exc, "column", None)
        raise FormulaParseError(str(exc), position=pos) from exc


def evaluate_arithmetic(node: Tree | Token) -> float:
    """Evaluate a parse tree from :func:`parse_arithmetic`.

    Raises:
        ZeroDivisionError: On division by zero.
    """
    if isinstance(node, Token):
        return float(node)

    rule = node.data
    if rule == "number":
        return float(node.children[0])
    if rule == "add":
        return evaluate_arithmetic(node.children[0]) + evaluate_arithmetic(node.children[1])
    if rule == "sub":
        return evaluate_arithmetic(node.children[0]) - evaluate_arithmetic(node.children[1])
    if rule == "mul":
        return evaluate_arithmetic(node.children[0]) * evaluate_arithmetic(node.children[1])
    if rule == "div":
        left = evaluate_arithmetic(node.children[0])
        right = evaluate_arithmetic(node.children[1])
        if right == 0:
            raise ZeroDivisionError("Division by zero in formula")
        return left / right
    if rule == "neg":
        return -evaluate_arithmetic(node.children[0])
    if rule == "pos":
        return evaluate_arithmetic(node.children[0])

    raise FormulaError(f"Unknown node type: {rule}")


def split_call(content: str) -> tuple[str, str] | None:
    """Split ``NAME(rest`` into ``(NAME, rest)``.

    *rest* is everything after the opening parenthesis; each handler
    decides how many arguments to read from it.  Returns ``None`` when
    *content* does not start with a call.
    """
    m = CALL_RE.match(content)
    if not m:
        return None
    return m.group(1), content[m.end():]


_ARG_PATTERNS = {
    1: re.compile(r"^(.*?)\)"),
    2: re.compile(r"^(.*?),(.*?)\)"),
    3: re.compile(r"^(.*?),(.*?),(.*?)\)"),
}


def read_args(rest: str, count: int) -> list[str] | None:
    """Read *count* comma-separated arguments up to the closing ``)``.

    Arguments are captured lazily: each stops at the first ``,`` (or the
    first ``)`` for the last one), so nested calls are not supported and
    any text after the closing parenthesis is ignored.

    Returns:
        The raw (untrimmed) argument texts, or ``None`` if they are absent.
    """
    m = _ARG_PATTERNS[count].match(rest)
    if not m:
        return None
    return list(m.groups())

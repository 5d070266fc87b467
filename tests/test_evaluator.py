"""Tests for formula evaluation: literals, arithmetic, references, fallthrough."""

from __future__ import annotations

import pytest

from gridcalc.formulas import ERROR, NOT_AVAILABLE, evaluate


# ────────────────────────────────────────────────────────────────
# Literals
# ────────────────────────────────────────────────────────────────


class TestLiterals:
    @pytest.mark.parametrize("value", ["", "hello", "42", " =A1", "sum(A1:A2)", "#ERROR"])
    def test_non_formula_returned_unchanged(self, value: str) -> None:
        assert evaluate(value, {}) == value
        assert evaluate(value, {"A1": "1", "A2": "2"}) == value

    def test_lone_equals_passes_through(self) -> None:
        assert evaluate("=", {}) == "="


# ────────────────────────────────────────────────────────────────
# Arithmetic
# ────────────────────────────────────────────────────────────────


class TestArithmetic:
    def test_precedence(self) -> None:
        assert evaluate("=5+3*2", {}) == "11"

    def test_parentheses(self) -> None:
        assert evaluate("=(5+3)*2", {}) == "16"

    def test_fractional_result(self) -> None:
        assert evaluate("=10/4", {}) == "2.5"

    def test_float_display(self) -> None:
        assert evaluate("=0.1+0.2", {}) == "0.30000000000000004"

    def test_unary_minus(self) -> None:
        assert evaluate("=-3+1", {}) == "-2"
        assert evaluate("=-(2+3)*2", {}) == "-10"

    def test_left_associative(self) -> None:
        assert evaluate("=2-3-4", {}) == "-5"
        assert evaluate("=8/4/2", {}) == "1"

    def test_whitespace_ignored(self) -> None:
        assert evaluate("= 1 + 2 ", {}) == "3"

    def test_division_by_zero(self) -> None:
        assert evaluate("=1/0", {}) == ERROR

    def test_unbalanced_parentheses(self) -> None:
        assert evaluate("=2*(3", {}) == ERROR

    def test_malformed_number(self) -> None:
        assert evaluate("=1.2.3", {}) == ERROR

    def test_adjacent_numbers(self) -> None:
        assert evaluate("=1 2", {}) == ERROR

    def test_whitespace_only(self) -> None:
        assert evaluate("=   ", {}) == ERROR


# ────────────────────────────────────────────────────────────────
# Cell references and passthrough
# ────────────────────────────────────────────────────────────────


class TestReferences:
    def test_present_reference(self) -> None:
        assert evaluate("=B12", {"B12": "hi"}) == "hi"

    def test_missing_reference_is_empty(self) -> None:
        assert evaluate("=A1", {}) == ""

    def test_reference_is_case_insensitive(self) -> None:
        assert evaluate("=a1", {"A1": "7"}) == "7"

    def test_multi_letter_column_passes_through(self) -> None:
        assert evaluate("=AA1", {"AA1": "7"}) == "=AA1"

    def test_trailing_newline_passes_through(self) -> None:
        assert evaluate("=A1\n", {"A1": "x"}) == "=A1\n"

    def test_huge_range_sums_present_cells(self) -> None:
        snapshot = {"A1": "1", "Z99999999": "2", "B5": "3"}
        assert evaluate("=SUM(A1:Z99999999)", snapshot) == "6"

    def test_reference_arithmetic_passes_through(self) -> None:
        assert evaluate("=A1+1", {"A1": "2"}) == "=A1+1"

    def test_unknown_text_returned_verbatim(self) -> None:
        assert evaluate("=hello world", {}) == "=hello world"

    def test_unknown_function_passes_through(self) -> None:
        assert evaluate("=IFERROR(1,2)", {}) == "=IFERROR(1,2)"

    def test_failed_match_returns_original_case(self) -> None:
        """SQRT of a negative fails its match; letters keep it from arithmetic."""
        assert evaluate("=SQRT(-4)", {}) == "=SQRT(-4)"
        assert evaluate("=sqrt(-4)", {}) == "=sqrt(-4)"


# ────────────────────────────────────────────────────────────────
# Contract
# ────────────────────────────────────────────────────────────────


class TestContract:
    def test_sum_coerces_non_numeric_to_zero(self) -> None:
        snapshot = {"A1": "1", "A2": "2", "A3": "abc"}
        assert evaluate("=SUM(A1:A3)", snapshot) == "3"

    def test_min_excludes_non_numeric(self) -> None:
        snapshot = {"A1": "abc", "A2": "5"}
        assert evaluate("=MIN(A1:A2)", snapshot) == "5"
        assert evaluate("=SUM(A1:A2)", snapshot) == "5"

    def test_if_compares_cells(self) -> None:
        assert evaluate('=IF(A1>A2,"X","Y")', {"A1": "10", "A2": "5"}) == "X"

    def test_vlookup(self) -> None:
        snapshot = {"A1": "Apple", "B1": "5", "A2": "Pear", "B2": "3"}
        assert evaluate('=VLOOKUP("Apple",A1:B3,2)', snapshot) == "5"
        assert evaluate('=VLOOKUP("Plum",A1:B3,2)', snapshot) == NOT_AVAILABLE

    @pytest.mark.parametrize("value", ["7", "-2.5", "12.75"])
    @pytest.mark.parametrize("func", ["SUM", "MIN", "MAX", "PRODUCT"])
    def test_singleton_range_is_identity(self, func: str, value: str) -> None:
        assert evaluate(f"={func}(X1:X1)", {"X1": value}) == value

    def test_deterministic(self) -> None:
        snapshot = {"A1": "3", "A2": "4"}
        first = evaluate("=AVERAGE(A1:A2)", snapshot)
        assert evaluate("=AVERAGE(A1:A2)", snapshot) == first == "3.5"

    def test_snapshot_not_modified(self) -> None:
        snapshot = {"A1": "1"}
        evaluate("=SUM(A1:A9)", snapshot)
        evaluate("=A5", snapshot)
        assert snapshot == {"A1": "1"}

    @pytest.mark.parametrize("formula", [
        "=1/(2-2)",
        "=ROUND(1,-1)",
        "=VLOOKUP(\"A\",A1:A2,x)",
    ])
    def test_never_raises(self, formula: str) -> None:
        assert evaluate(formula, {"A1": "A"}) == ERROR

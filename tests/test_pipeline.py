"""Tests for the sanitize -> evaluate -> format pipeline."""

import pytest

from calculator.engine.pipeline import calculate_expression
from calculator.models.calculator import ERROR_SENTINEL, NEUTRAL_RESULT, ErrorKind


class TestSuccessfulEvaluation:
    """Tests for expressions that settle to a number."""

    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("2+3×4", "14"),
            ("10÷3", "3.333333"),
            ("2×(3+4)-5÷2", "11.5"),
            ("-5+2", "-3"),
            ("0.1+0.2", "0.3"),
            ("7+", "7"),
            ("5--3", "8"),
            ("5--3×2", "11"),
            ("3×-2", "-6"),
        ],
    )
    def test_results(self, expression, expected):
        outcome = calculate_expression(expression)
        assert outcome.result == expected
        assert outcome.is_error is False

    def test_implicit_multiplication(self):
        outcome = calculate_expression("1(2+3)")
        assert outcome.canonical_expression == "1*(2+3)"
        assert outcome.result == "5"
        assert outcome.value == 5.0

    def test_trailing_negative_sign(self):
        """Test "3×-" becomes "3*-0", and negative zero shows as "0"."""
        outcome = calculate_expression("3×-")
        assert outcome.canonical_expression == "3*-0"
        assert outcome.result == "0"

    def test_long_flat_expression(self):
        assert calculate_expression("1+" * 250 + "1").result == "251"

    def test_custom_places(self):
        assert calculate_expression("10÷3", places=2).result == "3.33"


class TestNeutralResult:
    """Tests for input with nothing to compute."""

    def test_empty(self):
        outcome = calculate_expression("")
        assert outcome.result == NEUTRAL_RESULT
        assert outcome.canonical_expression is None

    def test_whitespace_only(self):
        outcome = calculate_expression("   ")
        assert outcome.result == NEUTRAL_RESULT
        assert outcome.canonical_expression == ""


class TestErrorSentinel:
    """Tests for expressions that settle to the error sentinel."""

    @pytest.mark.parametrize("expression", [")(", "(1+2", "1+×2", "(2)(3)", "."])
    def test_syntax_errors(self, expression):
        outcome = calculate_expression(expression)
        assert outcome.result == ERROR_SENTINEL
        assert outcome.error_kind == ErrorKind.SYNTAX
        assert outcome.error_message

    @pytest.mark.parametrize("expression", ["5÷0", "5/0", "0÷0", "1÷(2-2)"])
    def test_arithmetic_errors(self, expression):
        outcome = calculate_expression(expression)
        assert outcome.result == ERROR_SENTINEL
        assert outcome.error_kind == ErrorKind.ARITHMETIC

    def test_deep_nesting_is_syntax_error(self):
        outcome = calculate_expression("(" * 300 + "1" + ")" * 300)
        assert outcome.result == ERROR_SENTINEL
        assert outcome.error_kind == ErrorKind.SYNTAX

    def test_sanitizer_failure_has_no_canonical_form(self):
        assert calculate_expression(")(").canonical_expression is None

    def test_evaluator_failure_keeps_canonical_form(self):
        outcome = calculate_expression("5÷0")
        assert outcome.canonical_expression == "5/0"
        assert outcome.value is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

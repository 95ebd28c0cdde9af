"""Tests for the sanitizer."""

import pytest

from calculator.engine.errors import ExpressionSyntaxError
from calculator.engine.sanitizer import sanitize_expression


class TestGlyphsAndWhitespace:
    """Tests for symbol mapping and whitespace removal."""

    def test_display_glyphs_mapped(self):
        assert sanitize_expression("2×3÷4") == "2*3/4"

    def test_whitespace_removed(self):
        assert sanitize_expression(" 1 +\t2 ") == "1+2"

    def test_ascii_operators_pass_through(self):
        assert sanitize_expression("5/2*3") == "5/2*3"


class TestImplicitMultiplication:
    """Tests for digit/paren adjacency."""

    def test_digit_before_paren(self):
        assert sanitize_expression("1(2+3)") == "1*(2+3)"

    def test_paren_before_digit(self):
        assert sanitize_expression("(2+3)4") == "(2+3)*4"

    def test_both_sides(self):
        assert sanitize_expression("2(3)4") == "2*(3)*4"

    def test_paren_paren_left_alone(self):
        """Test ")(" is not rewritten; the parser rejects it later."""
        assert sanitize_expression("(2)(3)") == "(2)(3)"


class TestOperatorRuns:
    """Tests for doubled operators."""

    def test_double_minus_becomes_plus(self):
        assert sanitize_expression("5--3") == "5+3"

    def test_double_minus_is_literal_not_sign_algebra(self):
        assert sanitize_expression("5--3×2") == "5+3*2"

    def test_multiply_negative_allowed(self):
        assert sanitize_expression("5×-3") == "5*-3"

    def test_divide_negative_allowed(self):
        assert sanitize_expression("6÷-2") == "6/-2"

    @pytest.mark.parametrize("expression", ["5+×3", "5×+3", "5+÷3", "5-×3", "5÷×3"])
    def test_other_runs_rejected(self, expression):
        with pytest.raises(ExpressionSyntaxError):
            sanitize_expression(expression)

    def test_allowed_run_does_not_excuse_another(self):
        """Test one legal "*-" does not let "+*" through."""
        with pytest.raises(ExpressionSyntaxError):
            sanitize_expression("2×-3+×4")


class TestBalanceAndTrailingOperator:
    """Tests for bracket balance and trailing operators."""

    def test_close_before_open_rejected(self):
        with pytest.raises(ExpressionSyntaxError):
            sanitize_expression(")(")

    def test_unclosed_rejected(self):
        with pytest.raises(ExpressionSyntaxError, match="unclosed"):
            sanitize_expression("(1+2")

    def test_trailing_operator_gets_zero(self):
        assert sanitize_expression("7+") == "7+0"
        assert sanitize_expression("3×") == "3*0"

    def test_trailing_negative_sign_gets_zero(self):
        assert sanitize_expression("3×-") == "3*-0"

    def test_error_position(self):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            sanitize_expression("1+×2")
        assert exc_info.value.position == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

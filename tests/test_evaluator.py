"""Tests for the tokenizer and recursive descent evaluator."""

import pytest

from calculator.engine.errors import ArithmeticFailure, ExpressionSyntaxError
from calculator.engine.evaluator import MAX_NESTING_DEPTH, Parser, Tokenizer, TokenType, evaluate_canonical


class TestTokenizer:
    """Tests for lexing canonical expressions."""

    def test_token_types(self):
        tokens = Tokenizer("2*(3.5-1)").tokens
        assert [t.type for t in tokens] == [
            TokenType.NUMBER, TokenType.MUL, TokenType.LPAREN, TokenType.NUMBER,
            TokenType.MINUS, TokenType.NUMBER, TokenType.RPAREN, TokenType.EOF,
        ]

    def test_partial_decimals_are_numbers(self):
        assert [t.text for t in Tokenizer("5.+.5").tokens[:3]] == ["5.", "+", ".5"]

    def test_unknown_character_rejected(self):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            Tokenizer("1e5")
        assert exc_info.value.position == 1

    def test_lone_point_rejected(self):
        with pytest.raises(ExpressionSyntaxError):
            Tokenizer(".")


class TestEvaluation:
    """Tests for arithmetic results."""

    def test_precedence(self):
        assert evaluate_canonical("2+3*4") == 14

    def test_parentheses(self):
        assert evaluate_canonical("(2+3)*4") == 20

    def test_left_associative(self):
        assert evaluate_canonical("10-4-3") == 3
        assert evaluate_canonical("8/2/2") == 2

    def test_unary_minus(self):
        assert evaluate_canonical("-5+2") == -3
        assert evaluate_canonical("2*-3") == -6
        assert evaluate_canonical("-(1+2)") == -3

    def test_unary_plus(self):
        assert evaluate_canonical("+3") == 3

    def test_partial_decimals(self):
        assert evaluate_canonical("5.") == 5.0
        assert evaluate_canonical(".5") == 0.5

    def test_float_arithmetic(self):
        """Test values are IEEE doubles, not exact decimals."""
        assert evaluate_canonical("0.1+0.2") == 0.1 + 0.2

    def test_empty_is_none(self):
        assert evaluate_canonical("") is None

    def test_long_sign_chain(self):
        assert evaluate_canonical("-" * 2001 + "1") == -1
        assert evaluate_canonical("-" * 2000 + "1") == 1

    def test_nesting_at_limit(self):
        depth = MAX_NESTING_DEPTH
        assert evaluate_canonical("(" * depth + "7" + ")" * depth) == 7


class TestEvaluationFailures:
    """Tests for classified failures."""

    def test_division_by_zero(self):
        with pytest.raises(ArithmeticFailure, match="Division by zero"):
            evaluate_canonical("5/0")

    def test_zero_by_zero(self):
        with pytest.raises(ArithmeticFailure):
            evaluate_canonical("0/0")

    def test_division_by_zero_expression(self):
        with pytest.raises(ArithmeticFailure):
            evaluate_canonical("1/(2-2)")

    def test_overflow(self):
        big = "1" + "0" * 200
        with pytest.raises(ArithmeticFailure):
            evaluate_canonical(f"{big}*{big}")

    def test_literal_too_large(self):
        with pytest.raises(ArithmeticFailure):
            evaluate_canonical("1" + "0" * 400)

    def test_nesting_beyond_limit(self):
        depth = 300
        with pytest.raises(ExpressionSyntaxError, match="nested"):
            evaluate_canonical("(" * depth + "1" + ")" * depth)

    def test_custom_nesting_limit(self):
        with pytest.raises(ExpressionSyntaxError):
            Parser(Tokenizer("((1))"), max_depth=1).parse()
        assert Parser(Tokenizer("(1)"), max_depth=1).parse() == 1

    @pytest.mark.parametrize("canonical", ["(2)(3)", "()", "1.2.3", "2+", "(1", "1)"])
    def test_syntax_errors(self, canonical):
        with pytest.raises(ExpressionSyntaxError):
            evaluate_canonical(canonical)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

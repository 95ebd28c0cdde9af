"""
Calculation engine package.

Pure functions and one small mutable buffer; no I/O, no timing.
"""

from calculator.engine.buffer import ExpressionBuffer
from calculator.engine.errors import (
    ArithmeticFailure,
    CalculationError,
    ExpressionSyntaxError,
)
from calculator.engine.evaluator import Parser, Tokenizer, evaluate_canonical
from calculator.engine.formatter import format_result, round_result, to_plain_string
from calculator.engine.pipeline import calculate_expression
from calculator.engine.sanitizer import sanitize_expression

__all__ = [
    "ExpressionBuffer",
    # Errors
    "ArithmeticFailure",
    "CalculationError",
    "ExpressionSyntaxError",
    # Stages
    "Parser",
    "Tokenizer",
    "calculate_expression",
    "evaluate_canonical",
    "format_result",
    "round_result",
    "sanitize_expression",
    "to_plain_string",
]

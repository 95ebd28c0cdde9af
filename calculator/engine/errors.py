"""
Calculation errors.

Raised inside the sanitize -> evaluate pipeline and converted to the
error sentinel before they reach the session. Nothing outside
`calculate_expression` should ever see one.
"""

from typing import Optional

from calculator.models.calculator import ErrorKind


class CalculationError(Exception):
    """Base exception for evaluation failures."""

    kind: ErrorKind = ErrorKind.SYNTAX


class ExpressionSyntaxError(CalculationError):
    """Unbalanced parentheses, illegal operator runs, unparseable input."""

    kind = ErrorKind.SYNTAX

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        super().__init__(message)


class ArithmeticFailure(CalculationError):
    """Division by zero or a non-finite intermediate/final value."""

    kind = ErrorKind.ARITHMETIC

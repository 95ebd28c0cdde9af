"""
Expression sanitizer.

Turns the display buffer into the canonical form the evaluator parses:

1. "×" -> "*", "÷" -> "/"
2. whitespace removed
3. implicit multiplication: "2(" -> "2*(", ")3" -> ")*3"
4. "--" -> "+"
5. operator runs longer than one character must be "*-" or "/-"
6. parentheses must balance exactly
7. a trailing operator gets a "0" operand ("7+" -> "7+0")

Steps 4 and 7 are literal text rewrites, not sign algebra. "5--3×2"
becomes "5+3*2", and "3×" becomes "3*0".
"""

import re

from calculator.engine.errors import ExpressionSyntaxError

_GLYPHS = str.maketrans({"×": "*", "÷": "/"})

_WHITESPACE = re.compile(r"\s+")
_DIGIT_OPEN_PAREN = re.compile(r"(\d)\(")
_CLOSE_PAREN_DIGIT = re.compile(r"\)(\d)")
_OPERATOR_RUN = re.compile(r"[+\-*/]{2,}")
_TRAILING_OPERATOR = re.compile(r"[+\-*/]$")

# Doubled operators that mean "times/divided by a negative"
_ALLOWED_RUNS = frozenset({"*-", "/-"})


def sanitize_expression(expression: str) -> str:
    """
    Produce the canonical form of a buffer.

    Raises:
        ExpressionSyntaxError: On an illegal operator run or unbalanced
            parentheses
    """
    canonical = expression.translate(_GLYPHS)
    canonical = _WHITESPACE.sub("", canonical)
    canonical = _DIGIT_OPEN_PAREN.sub(r"\1*(", canonical)
    canonical = _CLOSE_PAREN_DIGIT.sub(r")*\1", canonical)
    canonical = canonical.replace("--", "+")

    for run in _OPERATOR_RUN.finditer(canonical):
        if run.group() not in _ALLOWED_RUNS:
            raise ExpressionSyntaxError(
                f"Invalid operator sequence '{run.group()}'",
                position=run.start(),
            )

    _check_balance(canonical)

    if _TRAILING_OPERATOR.search(canonical):
        canonical += "0"

    return canonical


def _check_balance(canonical: str) -> None:
    depth = 0
    for position, char in enumerate(canonical):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise ExpressionSyntaxError("Unmatched ')'", position=position)
    if depth != 0:
        raise ExpressionSyntaxError(f"{depth} unclosed '('")

"""
Evaluation pipeline: sanitize -> evaluate -> round -> format.

This is the only place calculation errors are caught. Every call
returns an EvaluationOutcome whose `result` is safe to show.
"""

from calculator.engine.errors import CalculationError
from calculator.engine.evaluator import evaluate_canonical
from calculator.engine.formatter import DEFAULT_DECIMAL_PLACES, round_result, to_plain_string
from calculator.engine.sanitizer import sanitize_expression
from calculator.models.calculator import ERROR_SENTINEL, NEUTRAL_RESULT, EvaluationOutcome


def calculate_expression(
    expression: str,
    places: int = DEFAULT_DECIMAL_PLACES,
) -> EvaluationOutcome:
    """
    Evaluate a display-buffer expression.

    An empty expression gives the neutral result without parsing.
    Syntax and arithmetic failures give the error sentinel.
    """
    if not expression:
        return EvaluationOutcome(expression=expression, result=NEUTRAL_RESULT)

    canonical = None
    try:
        canonical = sanitize_expression(expression)
        value = evaluate_canonical(canonical)
    except CalculationError as e:
        return EvaluationOutcome(
            expression=expression,
            canonical_expression=canonical,
            result=ERROR_SENTINEL,
            error_kind=e.kind,
            error_message=str(e),
        )

    if value is None:
        return EvaluationOutcome(
            expression=expression,
            canonical_expression=canonical,
            result=NEUTRAL_RESULT,
        )

    rounded = round_result(value, places)
    return EvaluationOutcome(
        expression=expression,
        canonical_expression=canonical,
        value=rounded,
        result=to_plain_string(rounded),
    )

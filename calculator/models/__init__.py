"""
Data Models Package

This package contains all Pydantic models used by the calculator.
All data flowing between the engine, the session and the UI conforms
to these schemas.
"""

from calculator.models.calculator import (
    ERROR_SENTINEL,
    KEYPAD_LAYOUT,
    NEUTRAL_RESULT,
    OPERATOR_GLYPHS,
    ButtonKind,
    CalculatorSnapshot,
    ErrorKind,
    EvaluationOutcome,
    InteractionState,
    KeypadButton,
    KeypadToken,
)
from calculator.models.audit import (
    AuditSeverity,
    CalculatorEvent,
    CalculatorEventBuilder,
    CalculatorEventType,
)

__all__ = [
    # Calculator models
    "ERROR_SENTINEL",
    "KEYPAD_LAYOUT",
    "NEUTRAL_RESULT",
    "OPERATOR_GLYPHS",
    "ButtonKind",
    "CalculatorSnapshot",
    "ErrorKind",
    "EvaluationOutcome",
    "InteractionState",
    "KeypadButton",
    "KeypadToken",
    # Audit models
    "AuditSeverity",
    "CalculatorEvent",
    "CalculatorEventBuilder",
    "CalculatorEventType",
]

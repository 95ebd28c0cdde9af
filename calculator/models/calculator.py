"""
Core Data Models for the Keypad Calculator

These models define the vocabulary and the observable state of a
calculator session. They are designed to:
1. Make the accepted input tokens a closed set
2. Give the UI one immutable snapshot to render from
3. Carry evaluation outcomes (success or failure) as plain data

DESIGN DECISION: Failures are data, not exceptions, once they leave the
evaluation pipeline. An EvaluationOutcome always has a display string,
which is the error sentinel when something went wrong.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# CONSTANTS
# =============================================================================

# Shown instead of a number when an expression cannot be evaluated
ERROR_SENTINEL = "Error"

# "Nothing computed yet" / empty buffer
NEUTRAL_RESULT = "0"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class KeypadToken(str, Enum):
    """
    Every input the calculator accepts.

    Operators use their display glyphs; the sanitizer maps them to
    canonical arithmetic operators at evaluation time.
    """
    ZERO = "0"
    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    DECIMAL_POINT = "."
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "÷"
    CLEAR = "C"
    BACKSPACE = "←"
    EVALUATE = "="

    @property
    def is_digit(self) -> bool:
        return self.value.isdigit()

    @property
    def is_operator(self) -> bool:
        return self.value in OPERATOR_GLYPHS

    @property
    def is_command(self) -> bool:
        """Clear, backspace and evaluate act on the session, not the buffer."""
        return self in (KeypadToken.CLEAR, KeypadToken.BACKSPACE, KeypadToken.EVALUATE)


# Binary operators as they appear in the expression buffer
OPERATOR_GLYPHS = frozenset({"+", "-", "×", "÷"})


class InteractionState(str, Enum):
    """
    Lifecycle of a calculator session.

    IDLE -> EDITING -> PENDING -> SETTLED | SETTLED_ERROR
    Any edit from a settled state goes back to EDITING; clear goes to IDLE.
    """
    IDLE = "idle"                    # Buffer empty, neutral result
    EDITING = "editing"              # Buffer has input, no result shown
    PENDING = "pending"              # "=" pressed, settle delay running
    SETTLED = "settled"              # Numeric result shown
    SETTLED_ERROR = "settled_error"  # Error sentinel shown


class ErrorKind(str, Enum):
    """Why an evaluation failed."""
    SYNTAX = "syntax"
    ARITHMETIC = "arithmetic"


class ButtonKind(str, Enum):
    """Visual grouping of keypad buttons."""
    CLEAR = "clear"
    OPERATOR = "operator"
    NUMBER = "number"
    EQUALS = "equals"


# =============================================================================
# KEYPAD LAYOUT
# =============================================================================

class KeypadButton(BaseModel):
    """One button on the 4-column keypad grid."""
    model_config = ConfigDict(frozen=True)

    token: KeypadToken
    kind: ButtonKind
    span: int = Field(default=1, ge=1, le=4)

    @property
    def label(self) -> str:
        return self.token.value


KEYPAD_LAYOUT: tuple[KeypadButton, ...] = (
    KeypadButton(token=KeypadToken.CLEAR, kind=ButtonKind.CLEAR),
    KeypadButton(token=KeypadToken.OPEN_PAREN, kind=ButtonKind.OPERATOR),
    KeypadButton(token=KeypadToken.CLOSE_PAREN, kind=ButtonKind.OPERATOR),
    KeypadButton(token=KeypadToken.DIVIDE, kind=ButtonKind.OPERATOR),
    KeypadButton(token=KeypadToken.SEVEN, kind=ButtonKind.NUMBER),
    KeypadButton(token=KeypadToken.EIGHT, kind=ButtonKind.NUMBER),
    KeypadButton(token=KeypadToken.NINE, kind=ButtonKind.NUMBER),
    KeypadButton(token=KeypadToken.MULTIPLY, kind=ButtonKind.OPERATOR),
    KeypadButton(token=KeypadToken.FOUR, kind=ButtonKind.NUMBER),
    KeypadButton(token=KeypadToken.FIVE, kind=ButtonKind.NUMBER),
    KeypadButton(token=KeypadToken.SIX, kind=ButtonKind.NUMBER),
    KeypadButton(token=KeypadToken.SUBTRACT, kind=ButtonKind.OPERATOR),
    KeypadButton(token=KeypadToken.ONE, kind=ButtonKind.NUMBER),
    KeypadButton(token=KeypadToken.TWO, kind=ButtonKind.NUMBER),
    KeypadButton(token=KeypadToken.THREE, kind=ButtonKind.NUMBER),
    KeypadButton(token=KeypadToken.ADD, kind=ButtonKind.OPERATOR),
    KeypadButton(token=KeypadToken.ZERO, kind=ButtonKind.NUMBER, span=2),
    KeypadButton(token=KeypadToken.DECIMAL_POINT, kind=ButtonKind.NUMBER),
    KeypadButton(token=KeypadToken.EVALUATE, kind=ButtonKind.EQUALS),
)


# =============================================================================
# EVALUATION OUTCOME
# =============================================================================

class EvaluationOutcome(BaseModel):
    """
    Result of running one expression through sanitize -> evaluate -> format.

    `result` is always safe to display: a formatted number, the neutral
    value for an empty expression, or the error sentinel.
    """
    model_config = ConfigDict(frozen=True)

    expression: str = Field(
        ...,
        description="Raw buffer text that was evaluated"
    )
    canonical_expression: Optional[str] = Field(
        default=None,
        description="Sanitized form fed to the parser (None if rejected before parsing)"
    )
    value: Optional[float] = Field(
        default=None,
        description="Rounded numeric value (None on error or empty input)"
    )
    result: str = Field(
        ...,
        description="Display string"
    )
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error_kind is not None


# =============================================================================
# SESSION SNAPSHOT
# =============================================================================

class CalculatorSnapshot(BaseModel):
    """
    Everything the UI needs to render one frame of a session.

    Timed indicators (shake, copy confirmation) are resolved against the
    session clock at the moment the snapshot is taken.
    """
    model_config = ConfigDict(frozen=True)

    expression: str
    result: str
    state: InteractionState
    result_visible: bool = False
    structurally_valid: bool = True
    is_calculating: bool = False
    is_shaking: bool = False
    copy_confirmed: bool = False
    can_copy: bool = False
    can_use_result: bool = False
    copy_only: bool = False
    is_closed: bool = False

    @property
    def is_error(self) -> bool:
        return self.state == InteractionState.SETTLED_ERROR

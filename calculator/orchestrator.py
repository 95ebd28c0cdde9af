"""
Calculator Session Orchestrator

This module ties the buffer, validator, evaluation pipeline, clipboard
and audit logger together into one interactive calculator session:

    keypad token -> edit rules -> live validation
    "="          -> PENDING -> settle delay -> pipeline -> SETTLED | SETTLED_ERROR
    use / copy   -> hand the formatted result to the outside world

DESIGN DECISION: The session enforces the boundaries:
- Typing never evaluates; only "=" runs the pipeline
- Only the most recent evaluation request may settle
- Exports only ever carry a settled, formatted result
- Evaluation errors become the error sentinel, never exceptions

Timed indicators (error shake, copy confirmation) are deadlines against
an injectable clock. They switch themselves off when read after the
deadline, so the session needs no background tasks and works the same
under asyncio and under Streamlit reruns.
"""

import asyncio
import time
from typing import Callable, Optional, Union
from uuid import UUID

import structlog

from calculator.audit import AuditLogger, create_correlation_id
from calculator.config import CalculatorSettings, get_settings
from calculator.engine import ExpressionBuffer, calculate_expression
from calculator.models.calculator import (
    ERROR_SENTINEL,
    NEUTRAL_RESULT,
    CalculatorSnapshot,
    EvaluationOutcome,
    InteractionState,
    KeypadToken,
)
from calculator.services.clipboard import (
    ClipboardError,
    ClipboardInterface,
    InMemoryClipboard,
    SystemClipboard,
)
from calculator.services.storage import AuditStorageInterface, InMemoryAuditStorage
from calculator.validation import StructuralValidator


logger = structlog.get_logger(__name__)


class UnsupportedTokenError(ValueError):
    """Input outside the keypad vocabulary."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Unsupported calculator input: {token!r}")


class SessionClosedError(RuntimeError):
    """Input received after the session was dismissed."""
    pass


class CalculatorSession:
    """
    One open calculator, from construction until it is dismissed.

    States:
        IDLE          buffer empty, result "0"
        EDITING       buffer has input, no result shown
        PENDING       "=" pressed, waiting out the settle delay
        SETTLED       numeric result shown
        SETTLED_ERROR error sentinel shown, shake indicator on

    Export actions:
        use_result()   hand the result to `on_use_result` and close
        copy_result()  put the result on the clipboard, stay open

    Copy-only mode applies when `only_copy` is set or no `on_use_result`
    callback is supplied.
    """

    def __init__(
        self,
        on_close: Optional[Callable[[], None]] = None,
        on_use_result: Optional[Callable[[str], None]] = None,
        only_copy: bool = False,
        initial_value: str = "",
        clipboard: Optional[ClipboardInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[CalculatorSettings] = None,
        validator: Optional[StructuralValidator] = None,
        clock: Callable[[], float] = time.monotonic,
        correlation_id: Optional[UUID] = None,
    ):
        self._on_close = on_close
        self._on_use_result = on_use_result
        self._copy_only = only_copy or on_use_result is None
        self._clipboard = clipboard or InMemoryClipboard()
        self._audit_logger = audit_logger or AuditLogger()
        self._settings = settings or get_settings().calculator
        self._validator = validator or StructuralValidator()
        self._clock = clock
        self._correlation_id = correlation_id or create_correlation_id()

        # The seed is shown as-is, unevaluated, in both the buffer and the result
        self._buffer = ExpressionBuffer(initial_value)
        self._result = initial_value or NEUTRAL_RESULT
        self._seed_preview = bool(initial_value)
        self._state = InteractionState.EDITING if initial_value else InteractionState.IDLE
        self._structurally_valid = self._validator.validate(initial_value)

        self._latest_request = 0
        self._last_outcome: Optional[EvaluationOutcome] = None
        self._shake_until: Optional[float] = None
        self._copy_confirmed_until: Optional[float] = None
        self._closed = False

        self._audit_logger.log_session_opened(
            initial_value=initial_value,
            copy_only=self._copy_only,
            correlation_id=self._correlation_id,
        )

    # -------------------------------------------------------------------------
    # Read-only view
    # -------------------------------------------------------------------------

    @property
    def correlation_id(self) -> UUID:
        return self._correlation_id

    @property
    def expression(self) -> str:
        return self._buffer.text

    @property
    def result(self) -> str:
        return self._result

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def copy_only(self) -> bool:
        return self._copy_only

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def last_outcome(self) -> Optional[EvaluationOutcome]:
        return self._last_outcome

    @property
    def is_shaking(self) -> bool:
        return self._shake_until is not None and self._clock() < self._shake_until

    @property
    def copy_confirmed(self) -> bool:
        return (
            self._copy_confirmed_until is not None
            and self._clock() < self._copy_confirmed_until
        )

    @property
    def can_copy(self) -> bool:
        return (
            not self._closed
            and self._state == InteractionState.SETTLED
            and self._result not in (ERROR_SENTINEL, NEUTRAL_RESULT)
        )

    @property
    def can_use_result(self) -> bool:
        return (
            not self._closed
            and not self._copy_only
            and self._state == InteractionState.SETTLED
            and self._result != ERROR_SENTINEL
        )

    def snapshot(self) -> CalculatorSnapshot:
        """Current state for rendering."""
        settled = self._state in (InteractionState.SETTLED, InteractionState.SETTLED_ERROR)
        return CalculatorSnapshot(
            expression=self._buffer.text,
            result=self._result,
            state=self._state,
            result_visible=settled or self._seed_preview,
            structurally_valid=self._structurally_valid,
            is_calculating=self._state == InteractionState.PENDING,
            is_shaking=self.is_shaking,
            copy_confirmed=self.copy_confirmed,
            can_copy=self.can_copy,
            can_use_result=self.can_use_result,
            copy_only=self._copy_only,
            is_closed=self._closed,
        )

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    async def handle(self, token: Union[KeypadToken, str]) -> CalculatorSnapshot:
        """
        Dispatch any keypad token, including "=".

        Raises:
            UnsupportedTokenError: If the token is not on the keypad
            SessionClosedError: If the session was dismissed
        """
        token = self._coerce(token)
        if token == KeypadToken.EVALUATE:
            await self.evaluate()
        elif token == KeypadToken.CLEAR:
            self.clear()
        elif token == KeypadToken.BACKSPACE:
            self.backspace()
        else:
            self.append(token)
        return self.snapshot()

    def append(self, token: Union[KeypadToken, str]) -> bool:
        """
        Apply an edit token (digit, ".", parenthesis, operator).

        Leaves any settled state for EDITING, even if the edit rules
        ignore the token. Returns True if the buffer changed.
        """
        self._ensure_open()
        token = self._coerce(token)
        if token.is_command:
            raise UnsupportedTokenError(token.value)

        changed = self._buffer.append(token)
        self._invalidate_pending()
        self._seed_preview = False
        self._copy_confirmed_until = None
        self._state = InteractionState.EDITING
        self._structurally_valid = self._validator.validate(self._buffer.text)
        return changed

    def backspace(self) -> None:
        """Delete the last character; an emptied buffer resets to IDLE."""
        self._ensure_open()
        self._buffer.backspace()
        self._invalidate_pending()
        self._seed_preview = False

        if self._buffer:
            self._state = InteractionState.EDITING
        else:
            self._reset_result()

        self._structurally_valid = self._validator.validate(self._buffer.text)

    def clear(self) -> None:
        """Empty the buffer and drop every indicator; always ends in IDLE."""
        self._ensure_open()
        expression = self._buffer.text
        self._buffer.clear()
        self._invalidate_pending()
        self._seed_preview = False
        self._reset_result()
        self._shake_until = None
        self._structurally_valid = True

        self._audit_logger.log_buffer_cleared(
            expression=expression,
            correlation_id=self._correlation_id,
        )

    async def evaluate(self) -> Optional[EvaluationOutcome]:
        """
        Run the evaluation pipeline after the settle delay.

        Each call is an independent request. If another request starts, or
        the buffer is edited, before this one's delay ends, its outcome is
        discarded and None is returned. An empty buffer is a no-op.
        """
        self._ensure_open()
        if not self._buffer:
            return None

        expression = self._buffer.text
        self._latest_request += 1
        request_id = self._latest_request
        self._state = InteractionState.PENDING
        self._copy_confirmed_until = None

        self._audit_logger.log_evaluation_started(
            expression=expression,
            request_id=request_id,
            correlation_id=self._correlation_id,
        )

        await asyncio.sleep(self._settings.settle_delay_seconds)

        if request_id != self._latest_request or self._closed:
            self._audit_logger.log_stale_result_discarded(
                request_id=request_id,
                latest_request_id=self._latest_request,
                correlation_id=self._correlation_id,
            )
            return None

        outcome = calculate_expression(expression, places=self._settings.result_decimal_places)
        self._apply_outcome(outcome)
        return outcome

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def use_result(self) -> bool:
        """
        Hand the settled result to `on_use_result` and close the session.

        Returns False (and does nothing) when the action is unavailable.
        """
        if not self.can_use_result:
            logger.warning(
                "use_result_unavailable",
                state=self._state.value,
                copy_only=self._copy_only,
                correlation_id=str(self._correlation_id),
            )
            return False

        result = self._result
        self._on_use_result(result)
        self._audit_logger.log_result_used(
            result=result,
            correlation_id=self._correlation_id,
        )
        self.close()
        return True

    def copy_result(self) -> bool:
        """
        Copy the settled result to the clipboard.

        A clipboard failure is logged and otherwise ignored: the session
        stays as it was and no confirmation is shown.
        """
        if not self.can_copy:
            return False

        result = self._result
        try:
            self._clipboard.copy(result)
        except ClipboardError as e:
            logger.error(
                "clipboard_write_failed",
                error=str(e),
                correlation_id=str(self._correlation_id),
            )
            self._audit_logger.log_clipboard_write_failed(
                result=result,
                error_message=str(e),
                correlation_id=self._correlation_id,
            )
            return False

        self._copy_confirmed_until = self._clock() + self._settings.copy_confirmation_seconds
        self._audit_logger.log_result_copied(
            result=result,
            correlation_id=self._correlation_id,
        )
        return True

    def close(self) -> None:
        """Dismiss the calculator. Safe to call more than once."""
        if self._closed:
            return

        expression = self._buffer.text
        self._buffer.clear()
        self._invalidate_pending()
        self._seed_preview = False
        self._reset_result()
        self._shake_until = None
        self._closed = True

        self._audit_logger.log_session_closed(
            expression=expression,
            correlation_id=self._correlation_id,
        )
        if self._on_close:
            self._on_close()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _apply_outcome(self, outcome: EvaluationOutcome) -> None:
        self._last_outcome = outcome
        self._result = outcome.result
        self._seed_preview = False

        if outcome.is_error:
            self._state = InteractionState.SETTLED_ERROR
            self._shake_until = self._clock() + self._settings.shake_duration_seconds
            self._audit_logger.log_evaluation_failed(
                expression=outcome.expression,
                error_kind=outcome.error_kind.value,
                error_message=outcome.error_message or "",
                correlation_id=self._correlation_id,
            )
        else:
            self._state = InteractionState.SETTLED
            self._audit_logger.log_evaluation_succeeded(
                expression=outcome.expression,
                canonical_expression=outcome.canonical_expression or "",
                result=outcome.result,
                correlation_id=self._correlation_id,
            )

    def _reset_result(self) -> None:
        self._result = NEUTRAL_RESULT
        self._copy_confirmed_until = None
        self._state = InteractionState.IDLE

    def _invalidate_pending(self) -> None:
        # Bumping the counter makes any in-flight evaluation stale
        if self._state == InteractionState.PENDING:
            self._latest_request += 1

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError("Calculator session is closed")

    @staticmethod
    def _coerce(token: Union[KeypadToken, str]) -> KeypadToken:
        if isinstance(token, KeypadToken):
            return token
        try:
            return KeypadToken(token)
        except ValueError:
            raise UnsupportedTokenError(token) from None


def create_calculator_session(
    on_close: Optional[Callable[[], None]] = None,
    on_use_result: Optional[Callable[[str], None]] = None,
    only_copy: bool = False,
    initial_value: str = "",
    use_system_clipboard: bool = True,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> CalculatorSession:
    """
    Factory function to create a fully wired calculator session.

    Args:
        use_system_clipboard: Copy to the OS clipboard via pyperclip.
                    Set to False for tests and headless servers.
        audit_storage: Sink for the session's audit events.
                    Defaults to a fresh in-memory store.
    """
    storage = audit_storage if audit_storage is not None else InMemoryAuditStorage()
    clipboard = SystemClipboard() if use_system_clipboard else InMemoryClipboard()

    return CalculatorSession(
        on_close=on_close,
        on_use_result=on_use_result,
        only_copy=only_copy,
        initial_value=initial_value,
        clipboard=clipboard,
        audit_logger=AuditLogger(storage),
        settings=get_settings().calculator,
    )

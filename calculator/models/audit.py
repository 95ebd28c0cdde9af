"""
Audit Models for the Keypad Calculator

Significant calculator interactions are logged for audit purposes.
This provides:
1. Traceability of what was computed and what left the calculator
2. Debugging information when an expression is rejected
3. A per-session history the UI can show

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
Individual digit presses are not audited; only evaluations, exports and
lifecycle changes are.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Longest expression or result text quoted in a description
DESCRIPTION_PREVIEW_CHARS = 120


def _preview(text: str) -> str:
    """Shorten text for a description; the full text belongs in details."""
    if len(text) <= DESCRIPTION_PREVIEW_CHARS:
        return text
    return text[: DESCRIPTION_PREVIEW_CHARS - 3] + "..."


class CalculatorEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Session lifecycle
    SESSION_OPENED = "session_opened"
    SESSION_CLOSED = "session_closed"
    BUFFER_CLEARED = "buffer_cleared"

    # Evaluation
    EVALUATION_STARTED = "evaluation_started"
    EVALUATION_SUCCEEDED = "evaluation_succeeded"
    EVALUATION_FAILED = "evaluation_failed"
    STALE_RESULT_DISCARDED = "stale_result_discarded"

    # Export
    RESULT_USED = "result_used"
    RESULT_COPIED = "result_copied"
    CLIPBOARD_WRITE_FAILED = "clipboard_write_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class CalculatorEvent(BaseModel):
    """
    A single audit event.

    Every event in one calculator session shares the session's
    correlation ID.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: CalculatorEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Correlation - all events of one session
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID of the calculator session that produced the event"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class CalculatorEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = CalculatorEventBuilder.evaluation_succeeded("1+2", "1+2", "3", session_id)
        event = CalculatorEventBuilder.result_copied("3", session_id)
    """

    @staticmethod
    def session_opened(
        initial_value: str,
        copy_only: bool,
        correlation_id: UUID
    ) -> CalculatorEvent:
        return CalculatorEvent(
            event_type=CalculatorEventType.SESSION_OPENED,
            correlation_id=correlation_id,
            description="Calculator opened",
            details={
                "initial_value": initial_value,
                "copy_only": copy_only,
            },
            is_user_action=True,
        )

    @staticmethod
    def session_closed(
        expression: str,
        correlation_id: UUID
    ) -> CalculatorEvent:
        return CalculatorEvent(
            event_type=CalculatorEventType.SESSION_CLOSED,
            correlation_id=correlation_id,
            description="Calculator closed",
            details={"expression": expression},
            is_user_action=True,
        )

    @staticmethod
    def buffer_cleared(
        expression: str,
        correlation_id: UUID
    ) -> CalculatorEvent:
        return CalculatorEvent(
            event_type=CalculatorEventType.BUFFER_CLEARED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description="Expression cleared",
            details={"expression": expression},
            is_user_action=True,
        )

    @staticmethod
    def evaluation_started(
        expression: str,
        request_id: int,
        correlation_id: UUID
    ) -> CalculatorEvent:
        return CalculatorEvent(
            event_type=CalculatorEventType.EVALUATION_STARTED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Evaluating: {_preview(expression)}",
            details={
                "expression": expression,
                "request_id": request_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def evaluation_succeeded(
        expression: str,
        canonical_expression: str,
        result: str,
        correlation_id: UUID
    ) -> CalculatorEvent:
        return CalculatorEvent(
            event_type=CalculatorEventType.EVALUATION_SUCCEEDED,
            correlation_id=correlation_id,
            description=f"{_preview(expression)} = {_preview(result)}",
            details={
                "expression": expression,
                "canonical_expression": canonical_expression,
                "result": result,
            },
        )

    @staticmethod
    def evaluation_failed(
        expression: str,
        error_kind: str,
        error_message: str,
        correlation_id: UUID
    ) -> CalculatorEvent:
        return CalculatorEvent(
            event_type=CalculatorEventType.EVALUATION_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Evaluation failed ({error_kind}): {_preview(expression)}",
            details={
                "expression": expression,
                "error_kind": error_kind,
            },
            error_message=error_message,
        )

    @staticmethod
    def stale_result_discarded(
        request_id: int,
        latest_request_id: int,
        correlation_id: UUID
    ) -> CalculatorEvent:
        return CalculatorEvent(
            event_type=CalculatorEventType.STALE_RESULT_DISCARDED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Discarded result of superseded request {request_id}",
            details={
                "request_id": request_id,
                "latest_request_id": latest_request_id,
            },
        )

    @staticmethod
    def result_used(
        result: str,
        correlation_id: UUID
    ) -> CalculatorEvent:
        return CalculatorEvent(
            event_type=CalculatorEventType.RESULT_USED,
            correlation_id=correlation_id,
            description=f"Result handed to form: {_preview(result)}",
            details={"result": result},
            is_user_action=True,
        )

    @staticmethod
    def result_copied(
        result: str,
        correlation_id: UUID
    ) -> CalculatorEvent:
        return CalculatorEvent(
            event_type=CalculatorEventType.RESULT_COPIED,
            correlation_id=correlation_id,
            description=f"Result copied to clipboard: {_preview(result)}",
            details={"result": result},
            is_user_action=True,
        )

    @staticmethod
    def clipboard_write_failed(
        result: str,
        error_message: str,
        correlation_id: UUID
    ) -> CalculatorEvent:
        return CalculatorEvent(
            event_type=CalculatorEventType.CLIPBOARD_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description="Clipboard write failed",
            details={"result": result},
            error_message=error_message,
        )

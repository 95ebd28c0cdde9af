"""
Audit Logger

DESIGN DECISION: Every evaluation, export and lifecycle change of a
calculator session is logged. This provides:
1. Traceability of what was computed and where it went
2. Debugging capability for rejected expressions
3. A history the UI can show for the current session

The audit logger:
- Gracefully handles failures (never breaks the calculator if logging fails)
- Supports correlation IDs to trace all events of one session
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from calculator.models.audit import CalculatorEvent, CalculatorEventBuilder
from calculator.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage sink, if one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for the event history.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: CalculatorEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage is not None:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_session_opened(
        self,
        initial_value: str,
        copy_only: bool,
        correlation_id: UUID,
    ) -> None:
        """Log a new calculator session."""
        self.log(CalculatorEventBuilder.session_opened(
            initial_value=initial_value,
            copy_only=copy_only,
            correlation_id=correlation_id,
        ))

    def log_session_closed(self, expression: str, correlation_id: UUID) -> None:
        self.log(CalculatorEventBuilder.session_closed(
            expression=expression,
            correlation_id=correlation_id,
        ))

    def log_buffer_cleared(self, expression: str, correlation_id: UUID) -> None:
        self.log(CalculatorEventBuilder.buffer_cleared(
            expression=expression,
            correlation_id=correlation_id,
        ))

    def log_evaluation_started(
        self,
        expression: str,
        request_id: int,
        correlation_id: UUID,
    ) -> None:
        self.log(CalculatorEventBuilder.evaluation_started(
            expression=expression,
            request_id=request_id,
            correlation_id=correlation_id,
        ))

    def log_evaluation_succeeded(
        self,
        expression: str,
        canonical_expression: str,
        result: str,
        correlation_id: UUID,
    ) -> None:
        """Log a settled numeric result."""
        self.log(CalculatorEventBuilder.evaluation_succeeded(
            expression=expression,
            canonical_expression=canonical_expression,
            result=result,
            correlation_id=correlation_id,
        ))

    def log_evaluation_failed(
        self,
        expression: str,
        error_kind: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log an expression that settled to the error sentinel."""
        self.log(CalculatorEventBuilder.evaluation_failed(
            expression=expression,
            error_kind=error_kind,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_stale_result_discarded(
        self,
        request_id: int,
        latest_request_id: int,
        correlation_id: UUID,
    ) -> None:
        self.log(CalculatorEventBuilder.stale_result_discarded(
            request_id=request_id,
            latest_request_id=latest_request_id,
            correlation_id=correlation_id,
        ))

    def log_result_used(self, result: str, correlation_id: UUID) -> None:
        self.log(CalculatorEventBuilder.result_used(
            result=result,
            correlation_id=correlation_id,
        ))

    def log_result_copied(self, result: str, correlation_id: UUID) -> None:
        self.log(CalculatorEventBuilder.result_copied(
            result=result,
            correlation_id=correlation_id,
        ))

    def log_clipboard_write_failed(
        self,
        result: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a clipboard failure. The session carries on regardless."""
        self.log(CalculatorEventBuilder.clipboard_write_failed(
            result=result,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this when a calculator session opens and pass it to every
    event the session produces.
    """
    return uuid4()

"""Tests for audit events, storage and the audit logger."""

from uuid import uuid4

import pytest

from calculator.audit import AuditLogger, create_correlation_id
from calculator.models.audit import (
    AuditSeverity,
    CalculatorEvent,
    CalculatorEventBuilder,
    CalculatorEventType,
)
from calculator.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    StorageError,
)


class FailingStorage(AuditStorageInterface):
    """Storage whose writes always fail."""

    def append_event(self, event):
        raise StorageError("disk full")

    def get_events(self, correlation_id=None, event_type=None, limit=100):
        return []


class TestEventBuilder:
    """Tests for CalculatorEventBuilder."""

    def test_evaluation_succeeded(self):
        session_id = create_correlation_id()
        event = CalculatorEventBuilder.evaluation_succeeded("1+2", "1+2", "3", session_id)
        assert event.event_type == CalculatorEventType.EVALUATION_SUCCEEDED
        assert event.severity == AuditSeverity.INFO
        assert event.correlation_id == session_id
        assert event.details["result"] == "3"

    def test_failure_severities(self):
        session_id = uuid4()
        failed = CalculatorEventBuilder.evaluation_failed("5÷0", "arithmetic", "Division by zero", session_id)
        clipboard = CalculatorEventBuilder.clipboard_write_failed("3", "no display", session_id)
        assert failed.severity == AuditSeverity.WARNING
        assert failed.error_message == "Division by zero"
        assert clipboard.severity == AuditSeverity.ERROR

    def test_noisy_events_are_debug(self):
        session_id = uuid4()
        assert CalculatorEventBuilder.buffer_cleared("1", session_id).severity == AuditSeverity.DEBUG
        assert CalculatorEventBuilder.evaluation_started("1", 1, session_id).severity == AuditSeverity.DEBUG
        assert CalculatorEventBuilder.stale_result_discarded(1, 2, session_id).severity == AuditSeverity.DEBUG

    def test_to_log_dict(self):
        session_id = uuid4()
        log_dict = CalculatorEventBuilder.result_copied("2.5", session_id).to_log_dict()
        assert log_dict["event_type"] == "result_copied"
        assert log_dict["correlation_id"] == str(session_id)
        assert log_dict["is_user_action"] is True

    def test_long_expression_shortened_in_description(self):
        """Test descriptions stay within limits while details keep everything."""
        session_id = uuid4()
        expression = "1+" * 300 + "1"
        result = "9" * 400
        events = [
            CalculatorEventBuilder.evaluation_started(expression, 1, session_id),
            CalculatorEventBuilder.evaluation_succeeded(expression, expression, result, session_id),
            CalculatorEventBuilder.evaluation_failed(expression, "syntax", "bad", session_id),
            CalculatorEventBuilder.result_used(result, session_id),
            CalculatorEventBuilder.result_copied(result, session_id),
        ]
        for event in events:
            assert len(event.description) <= 500
        assert events[0].details["expression"] == expression
        assert events[1].details["result"] == result

    def test_description_length_limit(self):
        with pytest.raises(ValueError):
            CalculatorEvent(
                event_type=CalculatorEventType.SESSION_OPENED,
                description="x" * 501,
            )


class TestInMemoryAuditStorage:
    """Tests for the bounded in-memory sink."""

    def test_filters(self):
        storage = InMemoryAuditStorage()
        first, second = uuid4(), uuid4()
        storage.append_event(CalculatorEventBuilder.result_used("1", first))
        storage.append_event(CalculatorEventBuilder.result_copied("2", second))
        storage.append_event(CalculatorEventBuilder.session_closed("", first))

        assert len(storage.get_events(correlation_id=first)) == 2
        copied = storage.get_events(event_type=CalculatorEventType.RESULT_COPIED)
        assert [e.details["result"] for e in copied] == ["2"]

    def test_limit_keeps_most_recent(self):
        storage = InMemoryAuditStorage()
        session_id = uuid4()
        for value in "123":
            storage.append_event(CalculatorEventBuilder.result_used(value, session_id))
        assert [e.details["result"] for e in storage.get_events(limit=2)] == ["2", "3"]
        assert storage.get_events(limit=0) == []

    def test_oldest_events_dropped(self):
        storage = InMemoryAuditStorage(max_events=2)
        session_id = uuid4()
        for value in "123":
            storage.append_event(CalculatorEventBuilder.result_used(value, session_id))
        assert [e.details["result"] for e in storage.get_events()] == ["2", "3"]

    def test_invalid_capacity(self):
        with pytest.raises(StorageError):
            InMemoryAuditStorage(max_events=0)


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_logs_to_storage(self):
        storage = InMemoryAuditStorage()
        audit = AuditLogger(storage)
        session_id = create_correlation_id()
        audit.log_session_opened(initial_value="", copy_only=True, correlation_id=session_id)
        events = storage.get_events()
        assert len(events) == 1
        assert events[0].details["copy_only"] is True

    def test_empty_storage_still_receives_events(self):
        """Test a fresh (empty) storage is not mistaken for no storage."""
        storage = InMemoryAuditStorage()
        audit = AuditLogger(storage)
        assert audit.log(CalculatorEventBuilder.result_used("1", uuid4())) is True
        assert len(storage.get_events()) == 1

    def test_without_storage(self):
        audit = AuditLogger()
        assert audit.storage is None
        assert audit.log(CalculatorEventBuilder.result_used("1", uuid4())) is True

    def test_storage_failure_is_swallowed(self):
        audit = AuditLogger(FailingStorage())
        assert audit.log(CalculatorEventBuilder.result_used("1", uuid4())) is False

    def test_correlation_ids_are_unique(self):
        assert create_correlation_id() != create_correlation_id()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

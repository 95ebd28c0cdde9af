"""In-process audit storage."""

from typing import Optional
from uuid import UUID

from calculator.models.audit import CalculatorEvent, CalculatorEventType
from calculator.services.storage.interface import AuditStorageInterface, StorageError


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Keeps audit events in a bounded list.

    Once `max_events` is reached the oldest events are dropped.
    """

    def __init__(self, max_events: int = 1000):
        if max_events < 1:
            raise StorageError("max_events must be at least 1")
        self._events: list[CalculatorEvent] = []
        self._max_events = max_events

    def append_event(self, event: CalculatorEvent) -> bool:
        self._events.append(event)
        if len(self._events) > self._max_events:
            del self._events[: len(self._events) - self._max_events]
        return True

    def get_events(
        self,
        correlation_id: Optional[UUID] = None,
        event_type: Optional[CalculatorEventType] = None,
        limit: int = 100,
    ) -> list[CalculatorEvent]:
        events = [
            event for event in self._events
            if (correlation_id is None or event.correlation_id == correlation_id)
            and (event_type is None or event.event_type == event_type)
        ]
        if limit <= 0:
            return []
        return events[-limit:]

"""
Abstract Audit Storage Interface

DESIGN DECISION: The audit logger writes to an interface, not a backend.
This allows us to:
1. Keep audit history in memory for the UI and tests
2. Plug in a durable sink later without touching the calculator
3. Keep the calculator decoupled from where its history ends up

Calculator state itself is never stored; only audit events are.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from calculator.models.audit import CalculatorEvent, CalculatorEventType


class StorageError(Exception):
    """Base exception for storage errors."""
    pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit event storage.

    Audit storage is append-only.
    """

    @abstractmethod
    def append_event(self, event: CalculatorEvent) -> bool:
        """
        Append an audit event.

        Args:
            event: The event to store

        Returns:
            True if stored successfully

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def get_events(
        self,
        correlation_id: Optional[UUID] = None,
        event_type: Optional[CalculatorEventType] = None,
        limit: int = 100,
    ) -> list[CalculatorEvent]:
        """
        Retrieve audit events, oldest first.

        Args:
            correlation_id: Only events of this session
            event_type: Only events of this type
            limit: Maximum number of events (the most recent ones are kept)
        """
        pass

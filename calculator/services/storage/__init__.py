"""
Storage Services Package

Provides the audit storage interface and the in-memory implementation.
"""

from calculator.services.storage.interface import (
    AuditStorageInterface,
    StorageError,
)
from calculator.services.storage.memory import InMemoryAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    # Exceptions
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
]

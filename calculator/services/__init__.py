"""Services package."""

from calculator.services.clipboard import (
    ClipboardError,
    ClipboardInterface,
    InMemoryClipboard,
    SystemClipboard,
)
from calculator.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    StorageError,
)

__all__ = [
    # Clipboard services
    "ClipboardError",
    "ClipboardInterface",
    "InMemoryClipboard",
    "SystemClipboard",
    # Storage services
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "StorageError",
]

"""Clipboard services package."""

from calculator.services.clipboard.interface import (
    ClipboardError,
    ClipboardInterface,
    InMemoryClipboard,
)
from calculator.services.clipboard.pyperclip_service import SystemClipboard

__all__ = [
    "ClipboardError",
    "ClipboardInterface",
    "InMemoryClipboard",
    "SystemClipboard",
]

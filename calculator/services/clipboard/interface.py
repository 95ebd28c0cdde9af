"""
Clipboard Interface

The clipboard is the calculator's only side effect besides the
"use result" callback. It is fire-and-forget: no retries, and failures
surface as ClipboardError for the caller to log.
"""

from abc import ABC, abstractmethod
from typing import Optional


class ClipboardError(Exception):
    """Writing to the clipboard failed."""
    pass


class ClipboardInterface(ABC):
    """Anything that can receive a copied result."""

    @abstractmethod
    def copy(self, text: str) -> None:
        """
        Place text on the clipboard.

        Raises:
            ClipboardError: If the write fails
        """
        pass


class InMemoryClipboard(ClipboardInterface):
    """
    Clipboard stand-in for tests and headless deployments.

    Set `fail_with` to make the next writes raise ClipboardError.
    """

    def __init__(self, fail_with: Optional[str] = None):
        self.contents: Optional[str] = None
        self.history: list[str] = []
        self.fail_with = fail_with

    def copy(self, text: str) -> None:
        if self.fail_with is not None:
            raise ClipboardError(self.fail_with)
        self.contents = text
        self.history.append(text)

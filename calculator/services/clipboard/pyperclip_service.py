"""
System clipboard backed by pyperclip.

pyperclip picks a platform mechanism (pbcopy, xclip, wl-copy, the
Windows API) at first use. When none is available it raises
PyperclipException, which we convert to ClipboardError.
"""

import pyperclip

from calculator.services.clipboard.interface import ClipboardError, ClipboardInterface


class SystemClipboard(ClipboardInterface):
    """Writes to the operating system clipboard."""

    def copy(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"Clipboard unavailable: {e}") from e

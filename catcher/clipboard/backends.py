"""Clipboard access: the system clipboard via ``pyperclip`` or an in-memory one."""

from __future__ import annotations

from typing import Protocol

import pyperclip


class ClipboardError(Exception):
    """Raised when the system clipboard cannot be read or written."""


class Clipboard(Protocol):
    def read_text(self) -> str | None: ...

    def write_text(self, text: str) -> None: ...


class MemoryClipboard:
    """A process-local clipboard, used by tests and headless hosts."""

    def __init__(self, text: str | None = None) -> None:
        self._text = text

    def read_text(self) -> str | None:
        return self._text

    def write_text(self, text: str) -> None:
        self._text = text


class SystemClipboard:
    """The OS clipboard.  An empty clipboard reads as ``None``."""

    def read_text(self) -> str | None:
        try:
            content = pyperclip.paste()
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(f"Clipboard access failed: {exc}") from exc
        return content or None

    def write_text(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(f"Clipboard access failed: {exc}") from exc

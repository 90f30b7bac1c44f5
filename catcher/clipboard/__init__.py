"""Clipboard package — backends and the snapshot history."""

from catcher.clipboard.backends import Clipboard, ClipboardError, MemoryClipboard, SystemClipboard
from catcher.clipboard.history import ClipboardHistory

__all__ = ["Clipboard", "ClipboardError", "MemoryClipboard", "SystemClipboard", "ClipboardHistory"]

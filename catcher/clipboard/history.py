"""In-memory, append-only clipboard history."""

from __future__ import annotations

import threading
from typing import Iterator, List, Tuple


class ClipboardHistory:
    """Ordered clipboard snapshots with consecutive-duplicate suppression.

    Appends are serialised behind a lock so the history has a single writer
    at a time even if the host calls in from several threads.  The log is
    never trimmed and does not survive the process.
    """

    def __init__(self) -> None:
        self._entries: List[str] = []
        self._lock = threading.Lock()

    def append(self, text: str) -> bool:
        """Record *text* unless it is empty or equals the latest entry.

        Returns ``True`` if a new entry was added.
        """
        if not text:
            return False
        with self._lock:
            if self._entries and self._entries[-1] == text:
                return False
            self._entries.append(text)
            return True

    @property
    def last(self) -> str | None:
        with self._lock:
            return self._entries[-1] if self._entries else None

    def entries(self) -> Tuple[str, ...]:
        """Return an immutable snapshot of the history, oldest first."""
        with self._lock:
            return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries())

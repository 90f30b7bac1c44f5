"""Data models for the fetch-and-extract pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

# Returned in place of an empty string when a page has no ``<p>`` elements.
NO_CONTENT = "Could not extract body text"

PARAGRAPH_SEPARATOR = "\n\n"


class ErrorKind(str, Enum):
    """Classification of a failed fetch."""

    INVALID_URL = "InvalidURL"
    NETWORK_ERROR = "NetworkError"
    EMPTY_RESPONSE = "EmptyResponse"
    DECODE_ERROR = "DecodeError"
    PARSE_ERROR = "ParseError"


class ExtractionError(Exception):
    """Raised when HTML cannot be parsed or paragraph extraction fails."""


@dataclass(frozen=True)
class Success:
    """A fetch that produced an extracted document."""

    text: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """A fetch that ended in a classified error."""

    kind: ErrorKind
    detail: str

    @property
    def ok(self) -> bool:
        return False

    def message(self) -> str:
        """Single-line, user-facing description of the failure."""
        if self.kind is ErrorKind.INVALID_URL:
            return "Invalid URL"
        return f"Failed to load content: {self.detail}"


FetchResult = Union[Success, Failure]


@dataclass(frozen=True)
class ExtractedDocument:
    """Ordered paragraph texts pulled from an HTML ``<body>``."""

    paragraphs: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.paragraphs

    @property
    def text(self) -> str:
        """Paragraphs joined by a blank line, or :data:`NO_CONTENT` if none."""
        if self.is_empty:
            return NO_CONTENT
        return PARAGRAPH_SEPARATOR.join(self.paragraphs)

    def __len__(self) -> int:
        return len(self.paragraphs)

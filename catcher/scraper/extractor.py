"""Body extraction: turns raw HTML into an :class:`ExtractedDocument`."""

from __future__ import annotations

import logging
from typing import List

from bs4 import BeautifulSoup
from bs4.element import Tag

from catcher.scraper.models import ExtractedDocument, ExtractionError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _element_text(tag: Tag) -> str:
    """Return the whitespace-normalised text content of *tag*.

    Line breaks separate words, so each ``<br>`` counts as a space.
    """
    for br in tag.find_all("br"):
        br.replace_with(" ")
    return " ".join(tag.get_text().split())


def _parse(html: str) -> BeautifulSoup:
    if not isinstance(html, str):
        raise ExtractionError(f"expected HTML text, got {type(html).__name__}")
    try:
        return BeautifulSoup(html, "html.parser")
    except Exception as exc:
        raise ExtractionError(f"could not parse HTML: {exc}") from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_document(html: str) -> ExtractedDocument:
    """Collect the text of every ``<p>`` inside ``<body>``, in document order.

    A document without ``<body>`` or without paragraphs is not an error; it
    yields an empty :class:`ExtractedDocument`, whose ``text`` is the
    :data:`~catcher.scraper.models.NO_CONTENT` sentinel.

    Raises:
        ExtractionError: If *html* cannot be parsed or extraction fails.
    """
    soup = _parse(html)
    body = soup.body
    if body is None:
        logger.debug("No <body> element found; returning empty document")
        return ExtractedDocument()

    try:
        paragraphs: List[str] = [_element_text(p) for p in body.find_all("p")]
    except Exception as exc:
        raise ExtractionError(f"paragraph extraction failed: {exc}") from exc

    return ExtractedDocument(paragraphs=paragraphs)


def extract_body_text(html: str) -> str:
    """Shortcut for ``extract_document(html).text``."""
    return extract_document(html).text

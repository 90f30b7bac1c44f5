"""Scraper package — URL detection, article fetch & body extraction."""

from catcher.scraper.detector import detect_url
from catcher.scraper.extractor import extract_body_text, extract_document
from catcher.scraper.fetcher import fetch_article, fetch_article_sync, is_openable
from catcher.scraper.models import (
    NO_CONTENT,
    ErrorKind,
    ExtractedDocument,
    ExtractionError,
    Failure,
    FetchResult,
    Success,
)

__all__ = [
    "detect_url",
    "extract_document",
    "extract_body_text",
    "fetch_article",
    "fetch_article_sync",
    "is_openable",
    "NO_CONTENT",
    "ErrorKind",
    "ExtractedDocument",
    "ExtractionError",
    "Failure",
    "FetchResult",
    "Success",
]

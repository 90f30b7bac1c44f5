"""Asynchronous article fetcher with outcome classification.

``fetch_article`` never raises for an expected failure: every outcome is
returned as a :class:`~catcher.scraper.models.Success` or a
:class:`~catcher.scraper.models.Failure`.  Cancellation is the exception:
``asyncio.CancelledError`` propagates so an abandoned fetch delivers nothing.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Union

import httpx

from catcher.config import settings
from catcher.scraper.extractor import extract_document
from catcher.scraper.models import ErrorKind, ExtractionError, Failure, FetchResult, Success

logger = logging.getLogger(__name__)

_OPENABLE_SCHEMES = ("http", "https")


class _Unset:
    """Marker type for "timeout not given, use the configured one"."""


_UNSET = _Unset()

Timeout = Union[float, None, _Unset]


def _default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def is_openable(url: str) -> bool:
    """Return ``True`` if *url* is an absolute http(s) URL with a host."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError, ValueError):
        return False
    return parsed.scheme in _OPENABLE_SCHEMES and bool(parsed.host)


def _decode(response: httpx.Response) -> str:
    """Strictly decode the body using the declared charset, else UTF-8."""
    encoding = response.charset_encoding or "utf-8"
    return response.content.decode(encoding)


async def _request(url: str, client: httpx.AsyncClient | None, timeout: Timeout) -> httpx.Response:
    """GET *url* and read the whole body.

    *timeout* here is the per-step httpx timeout; the caller bounds the
    request as a whole.
    """
    if client is None:
        async with httpx.AsyncClient(
            headers=_default_headers(),
            timeout=settings.timeout_seconds if isinstance(timeout, _Unset) else timeout,
            follow_redirects=settings.follow_redirects,
            max_redirects=settings.max_redirects,
        ) as own_client:
            return await own_client.get(url)
    if isinstance(timeout, _Unset):
        return await client.get(url)
    return await client.get(url, timeout=timeout)


async def fetch_article(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: Timeout = _UNSET,
) -> FetchResult:
    """GET *url*, decode the body and extract its paragraph text.

    Args:
        url: The detected URL to retrieve.
        client: Optional shared ``httpx.AsyncClient``.  When omitted a client
            is created from ``settings`` for this call and closed afterwards.
        timeout: Seconds allowed for the whole request, from connect to the
            last body byte (``None`` disables it).  Defaults to
            ``settings.request_timeout``.

    Returns:
        ``Success(text)`` with the extracted document, or ``Failure(kind,
        detail)`` classified as one of :class:`ErrorKind`.
    """
    if not is_openable(url):
        logger.info("Rejected non-openable URL %r", url)
        return Failure(ErrorKind.INVALID_URL, f"Cannot open URL: {url!r}")

    deadline = settings.timeout_seconds if isinstance(timeout, _Unset) else timeout

    logger.debug("Fetching %s (timeout=%s)", url, deadline)
    try:
        response = await asyncio.wait_for(_request(url, client, timeout), timeout=deadline)
    except asyncio.TimeoutError:
        logger.warning("Timed out fetching %s after %ss", url, deadline)
        return Failure(ErrorKind.NETWORK_ERROR, f"The request timed out after {deadline:g}s")
    except httpx.DecodingError as exc:
        logger.warning("Undecodable response body from %s: %s", url, exc)
        return Failure(ErrorKind.DECODE_ERROR, _describe(exc))
    except httpx.InvalidURL as exc:
        return Failure(ErrorKind.INVALID_URL, _describe(exc))
    except httpx.RequestError as exc:
        logger.warning("Network error fetching %s: %s", url, exc)
        return Failure(ErrorKind.NETWORK_ERROR, _describe(exc))

    if not response.content:
        logger.info("Empty response body from %s (HTTP %s)", url, response.status_code)
        return Failure(ErrorKind.EMPTY_RESPONSE, "No data")

    try:
        html = _decode(response)
    except (UnicodeDecodeError, LookupError) as exc:
        logger.warning("Could not decode body from %s: %s", url, exc)
        return Failure(ErrorKind.DECODE_ERROR, "Unable to decode data")

    loop = asyncio.get_running_loop()
    try:
        document = await loop.run_in_executor(None, extract_document, html)
    except ExtractionError as exc:
        logger.warning("Could not parse HTML from %s: %s", url, exc)
        return Failure(ErrorKind.PARSE_ERROR, _describe(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception("Extraction raised unexpectedly for %s", url)
        return Failure(ErrorKind.PARSE_ERROR, _describe(exc))

    logger.debug("Extracted %d paragraphs from %s", len(document), url)
    return Success(text=document.text)


def fetch_article_sync(url: str, *, timeout: Timeout = _UNSET) -> FetchResult:
    """Blocking wrapper around :func:`fetch_article` for synchronous hosts."""
    return asyncio.run(fetch_article(url, timeout=timeout))

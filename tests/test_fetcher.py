"""Tests for the asynchronous article fetcher.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made during ``fetch_article`` tests.
- ``extract_document`` is patched where a parse failure has to be forced;
  ``html.parser`` itself accepts almost any input.

pytest-asyncio runs with ``asyncio_mode = "auto"`` (see pyproject.toml), so
``async def`` tests are collected without markers.
"""

from __future__ import annotations

import asyncio
import threading
import time
from unittest.mock import patch

import httpx
import pytest
import respx

from catcher.config import settings
from catcher.scraper.fetcher import fetch_article, fetch_article_sync, is_openable
from catcher.scraper.models import NO_CONTENT, ErrorKind, ExtractionError, Failure, Success


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_URL = "https://example.com/article"

_ARTICLE_HTML = "<html><body><h1>T</h1><p>Hello</p><p>World</p></body></html>"


class _TrickleStream(httpx.AsyncByteStream):
    """A body that arrives one byte at a time, well inside any per-read timeout."""

    def __init__(self, size: int = 40, delay: float = 0.05) -> None:
        self.size = size
        self.delay = delay

    async def __aiter__(self):
        for _ in range(self.size):
            await asyncio.sleep(self.delay)
            yield b"x"


class _TrickleTransport(httpx.AsyncBaseTransport):
    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=_TrickleStream(), request=request)


class _HangingTransport(httpx.AsyncBaseTransport):
    """Accepts the request and never answers."""

    def __init__(self) -> None:
        self.started = asyncio.Event()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.started.set()
        await asyncio.Event().wait()
        raise AssertionError("unreachable")


# ---------------------------------------------------------------------------
# is_openable
# ---------------------------------------------------------------------------

class TestIsOpenable:
    @pytest.mark.parametrize("url", ["https://example.com", "http://example.com/a?b=c"])
    def test_http_urls_are_openable(self, url: str) -> None:
        assert is_openable(url) is True

    @pytest.mark.parametrize(
        "url",
        ["", "example.com", "/relative/path", "ftp://example.com/file", "https://", "not a url"],
    )
    def test_other_urls_are_not(self, url: str) -> None:
        assert is_openable(url) is False


# ---------------------------------------------------------------------------
# fetch_article — success paths
# ---------------------------------------------------------------------------

class TestFetchSuccess:
    async def test_extracts_paragraphs(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, text=_ARTICLE_HTML))
            result = await fetch_article(_URL)

        assert result == Success(text="Hello\n\nWorld")
        assert result.ok is True

    async def test_page_without_paragraphs_returns_sentinel(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(
                return_value=httpx.Response(200, text="<html><body></body></html>")
            )
            result = await fetch_article(_URL)

        assert result == Success(text=NO_CONTENT)

    async def test_error_status_body_is_still_extracted(self) -> None:
        html = "<html><body><p>Page not found</p></body></html>"
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(404, text=html))
            result = await fetch_article(_URL)

        assert result == Success(text="Page not found")

    async def test_declared_charset_is_honoured(self) -> None:
        body = "<html><body><p>Café</p></body></html>".encode("latin-1")
        with respx.mock:
            respx.get(_URL).mock(
                return_value=httpx.Response(
                    200,
                    content=body,
                    headers={"Content-Type": "text/html; charset=iso-8859-1"},
                )
            )
            result = await fetch_article(_URL)

        assert result == Success(text="Café")

    async def test_sends_user_agent(self) -> None:
        with respx.mock:
            route = respx.get(_URL).mock(return_value=httpx.Response(200, text=_ARTICLE_HTML))
            await fetch_article(_URL)

        assert route.calls.last.request.headers["User-Agent"] == settings.user_agent

    async def test_uses_injected_client(self) -> None:
        with respx.mock:
            route = respx.get(_URL).mock(return_value=httpx.Response(200, text=_ARTICLE_HTML))
            async with httpx.AsyncClient() as client:
                result = await fetch_article(_URL, client=client, timeout=5.0)

        assert route.called
        assert isinstance(result, Success)


# ---------------------------------------------------------------------------
# fetch_article — failure classification
# ---------------------------------------------------------------------------

class TestFetchFailures:
    async def test_invalid_url_fails_before_network(self) -> None:
        with respx.mock() as respx_mock:
            result = await fetch_article("ftp://example.com/file.txt")

        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.INVALID_URL
        assert not respx_mock.calls
        assert result.message() == "Invalid URL"

    async def test_timeout_is_network_error(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(side_effect=httpx.ReadTimeout("timed out"))
            result = await fetch_article(_URL)

        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.NETWORK_ERROR
        assert "timed out" in result.detail

    async def test_connection_refused_is_network_error(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(side_effect=httpx.ConnectError("Connection refused"))
            result = await fetch_article(_URL)

        assert result.kind is ErrorKind.NETWORK_ERROR
        assert result.message() == "Failed to load content: Connection refused"

    async def test_empty_body_is_empty_response(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, content=b""))
            result = await fetch_article(_URL)

        assert result == Failure(ErrorKind.EMPTY_RESPONSE, "No data")

    async def test_non_utf8_body_is_decode_error(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(
                return_value=httpx.Response(
                    200,
                    content=b"\xff\xfe<html>\xc3\x28</html>",
                    headers={"Content-Type": "text/html"},
                )
            )
            result = await fetch_article(_URL)

        assert result == Failure(ErrorKind.DECODE_ERROR, "Unable to decode data")

    async def test_unknown_charset_is_decode_error(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(
                return_value=httpx.Response(
                    200,
                    content=b"<html></html>",
                    headers={"Content-Type": "text/html; charset=no-such-codec"},
                )
            )
            result = await fetch_article(_URL)

        assert result.kind is ErrorKind.DECODE_ERROR

    async def test_extraction_error_is_parse_error(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, text=_ARTICLE_HTML))
            with patch(
                "catcher.scraper.fetcher.extract_document",
                side_effect=ExtractionError("bad markup"),
            ):
                result = await fetch_article(_URL)

        assert result == Failure(ErrorKind.PARSE_ERROR, "bad markup")

    async def test_unexpected_extraction_crash_is_parse_error(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, text=_ARTICLE_HTML))
            with patch(
                "catcher.scraper.fetcher.extract_document",
                side_effect=RuntimeError("boom"),
            ):
                result = await fetch_article(_URL)

        assert result.kind is ErrorKind.PARSE_ERROR
        assert result.detail == "boom"


# ---------------------------------------------------------------------------
# fetch_article_sync
# ---------------------------------------------------------------------------

class TestFetchSync:
    def test_blocking_wrapper(self) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, text=_ARTICLE_HTML))
            result = fetch_article_sync(_URL)

        assert result == Success(text="Hello\n\nWorld")


# ---------------------------------------------------------------------------
# fetch_article — timeout and cancellation
# ---------------------------------------------------------------------------

class TestFetchDeadline:
    async def test_timeout_bounds_the_whole_request(self) -> None:
        async with httpx.AsyncClient(transport=_TrickleTransport()) as client:
            started = time.monotonic()
            result = await fetch_article(_URL, client=client, timeout=0.3)
            elapsed = time.monotonic() - started

        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.NETWORK_ERROR
        assert "timed out" in result.detail
        assert elapsed < 1.5

    async def test_default_timeout_comes_from_settings(self, monkeypatch) -> None:
        monkeypatch.setattr("catcher.scraper.fetcher.settings.request_timeout", 0.3)
        async with httpx.AsyncClient(transport=_TrickleTransport()) as client:
            result = await fetch_article(_URL, client=client)

        assert result.kind is ErrorKind.NETWORK_ERROR


class TestFetchCancellation:
    async def test_cancel_during_request(self) -> None:
        transport = _HangingTransport()
        async with httpx.AsyncClient(transport=transport) as client:
            task = asyncio.create_task(fetch_article(_URL, client=client, timeout=None))
            await transport.started.wait()
            task.cancel()

            with pytest.raises(asyncio.CancelledError):
                await task

    async def test_cancel_during_extraction(self) -> None:
        entered = threading.Event()
        release = threading.Event()

        def _slow_extract(html: str):
            entered.set()
            release.wait(5)
            raise ExtractionError("released")

        try:
            with respx.mock:
                respx.get(_URL).mock(return_value=httpx.Response(200, text=_ARTICLE_HTML))
                with patch("catcher.scraper.fetcher.extract_document", side_effect=_slow_extract):
                    task = asyncio.create_task(fetch_article(_URL))
                    while not entered.is_set():
                        await asyncio.sleep(0.01)
                    task.cancel()

                    with pytest.raises(asyncio.CancelledError):
                        await task
        finally:
            release.set()

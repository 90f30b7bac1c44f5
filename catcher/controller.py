"""Host-facing controller that wires the clipboard to the fetch pipeline.

The host (a GUI shell, the CLI, a test) owns an :class:`ArticleCatcher` and
calls into it when its own events fire:

    app foreground   → on_foreground()
    user taps fetch  → fetch() / start_fetch()
    user edits text  → edit_text()
    device shake     → on_shake_detected()

Fetch results are applied to :class:`CatcherState` and delivered to the
``on_result`` callback on the event loop that started the fetch.  A fetch that
was cancelled or superseded never touches the state or fires its callback.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from catcher.clipboard.backends import Clipboard
from catcher.clipboard.history import ClipboardHistory
from catcher.scraper.detector import detect_url
from catcher.scraper.fetcher import fetch_article
from catcher.scraper.models import ErrorKind, Failure, FetchResult, Success

logger = logging.getLogger(__name__)

EMPTY_CLIPBOARD = "Clipboard is empty"

Fetcher = Callable[[str], Awaitable[FetchResult]]
ResultCallback = Callable[[FetchResult], None]


@dataclass
class CatcherState:
    text: str = ""
    detected_url: Optional[str] = None
    is_loading: bool = False
    error_message: Optional[str] = None
    history: ClipboardHistory = field(default_factory=ClipboardHistory)


class ArticleCatcher:
    def __init__(
        self,
        clipboard: Clipboard,
        history: ClipboardHistory | None = None,
        fetcher: Fetcher = fetch_article,
    ) -> None:
        self.clipboard = clipboard
        self.state = CatcherState(history=history if history is not None else ClipboardHistory())
        self._fetcher = fetcher
        self._request_id: str | None = None
        self._task: asyncio.Task[FetchResult] | None = None

    # ------------------------------------------------------------------
    # Clipboard events
    # ------------------------------------------------------------------

    @property
    def display_text(self) -> str:
        return self.state.text or EMPTY_CLIPBOARD

    def on_foreground(self) -> str | None:
        """Re-read the clipboard and recompute the detected URL."""
        text = self.clipboard.read_text()
        if not text:
            self.state.text = ""
            self.state.detected_url = None
            return None

        self.state.text = text
        self.state.detected_url = detect_url(text)
        self.state.history.append(text)
        logger.debug("Clipboard read; detected URL: %s", self.state.detected_url)
        return self.state.detected_url

    def edit_text(self, text: str) -> None:
        """Apply a user edit to both the clipboard and the history."""
        self.clipboard.write_text(text)
        self.state.text = text
        self.state.history.append(text)

    def on_shake_detected(self) -> str | None:
        """Revert the clipboard to the originally detected URL, if any."""
        url = self.state.detected_url
        if url is None:
            return None
        self.clipboard.write_text(url)
        self.state.text = url
        self.state.history.append(url)
        return url

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _begin(self) -> str:
        request_id = uuid.uuid4().hex
        self._request_id = request_id
        self.state.is_loading = True
        self.state.error_message = None
        return request_id

    def _is_current(self, request_id: str) -> bool:
        return self._request_id == request_id

    def _apply(self, result: FetchResult) -> None:
        self.state.is_loading = False
        self._request_id = None
        if isinstance(result, Success):
            self.clipboard.write_text(result.text)
            self.state.text = result.text
            self.state.history.append(result.text)
        else:
            self.state.error_message = result.message()

    async def _fetch(self, request_id: str, url: str | None) -> tuple[FetchResult, bool]:
        """Run one fetch; the flag tells whether its outcome was applied."""
        target = url or self.state.detected_url
        if not target:
            result: FetchResult = Failure(ErrorKind.INVALID_URL, "No URL detected")
        else:
            try:
                result = await self._fetcher(target)
            except asyncio.CancelledError:
                if self._is_current(request_id):
                    self.state.is_loading = False
                    self._request_id = None
                raise
            except Exception as exc:  # noqa: BLE001
                logger.exception("Fetcher raised for %s", target)
                result = Failure(ErrorKind.NETWORK_ERROR, str(exc) or type(exc).__name__)

        if not self._is_current(request_id):
            logger.debug("Discarding result of superseded fetch for %s", target)
            return result, False
        self._apply(result)
        return result, True

    async def fetch(self, url: str | None = None) -> FetchResult:
        """Fetch *url* (default: the detected URL) and apply the outcome.

        On failure the clipboard and ``state.text`` are left untouched and
        ``state.error_message`` carries a single-line description.
        """
        result, _ = await self._fetch(self._begin(), url)
        return result

    def start_fetch(
        self,
        url: str | None = None,
        on_result: ResultCallback | None = None,
    ) -> asyncio.Task[FetchResult]:
        """Schedule a fetch on the running loop, cancelling any outstanding one.

        Must be called from within a running event loop; *on_result* is
        invoked on that same loop.
        """
        loop = asyncio.get_running_loop()
        self.cancel_fetch()
        request_id = self._begin()

        async def _run() -> FetchResult:
            result, applied = await self._fetch(request_id, url)
            if applied and on_result is not None:
                on_result(result)
            return result

        self._task = loop.create_task(_run())
        return self._task

    def cancel_fetch(self) -> bool:
        """Abandon the in-flight fetch.  Returns ``True`` if one was pending.

        A task from :meth:`start_fetch` is cancelled outright.  A ``fetch()``
        coroutine awaited directly by the host is not cancelled (its caller
        owns it) but its result is no longer applied to the state.
        """
        task = self._task
        self._task = None
        pending = self._request_id is not None
        if task is not None and not task.done():
            task.cancel()
            pending = True
        self._request_id = None
        self.state.is_loading = False
        return pending

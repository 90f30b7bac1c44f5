"""Article Catcher CLI — a headless host for the clipboard pipeline.

Usage:
    python cli/main.py --help

Commands:
    detect    → find the first URL in some text (or the clipboard)
    extract   → pull paragraph text out of a local HTML document
    fetch     → fetch a URL and print its article text
    catch     → clipboard URL → article text → clipboard
    revert    → put a URL back on the clipboard
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from catcher.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import logging
from typing import NoReturn, Optional

import typer

from catcher.clipboard import ClipboardError, SystemClipboard
from catcher.config import settings
from catcher.controller import ArticleCatcher
from catcher.scraper import (
    ExtractionError,
    Failure,
    detect_url,
    extract_document,
    fetch_article,
)

app = typer.Typer(
    name="catcher",
    help="Article Catcher: turn copied links into article text.",
    no_args_is_help=True,
)


def _fail(message: str) -> NoReturn:
    typer.echo(f"❌ {message}")
    raise typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Configure logging for every sub-command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Pipeline stages
# ---------------------------------------------------------------------------

@app.command("detect")
def detect(
    text: Optional[str] = typer.Argument(None, help="Text to scan (default: the clipboard)."),
) -> None:
    """Print the first URL found in TEXT or in the clipboard."""
    if text is None:
        try:
            text = SystemClipboard().read_text() or ""
        except ClipboardError as exc:
            _fail(str(exc))

    url = detect_url(text)
    if url is None:
        _fail("No URL found.")
    typer.echo(url)


@app.command("extract")
def extract(
    path: str = typer.Argument("-", help="HTML file to read, or '-' for stdin."),
) -> None:
    """Print the paragraph text of an HTML document."""
    if path == "-":
        html = sys.stdin.read()
    else:
        source = Path(path)
        if not source.exists():
            _fail(f"No such file: {path}")
        html = source.read_text(encoding="utf-8", errors="replace")

    try:
        document = extract_document(html)
    except ExtractionError as exc:
        _fail(f"Failed to parse HTML: {exc}")
    typer.echo(document.text)


@app.command("fetch")
def fetch(
    url: str = typer.Argument(..., help="URL to fetch."),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Request timeout in seconds (default from settings)."
    ),
) -> None:
    """Fetch URL and print the extracted article text."""
    kwargs = {} if timeout is None else {"timeout": timeout}
    result = asyncio.run(fetch_article(url, **kwargs))
    if isinstance(result, Failure):
        _fail(result.message())
    typer.echo(result.text)


# ---------------------------------------------------------------------------
# Clipboard round-trips
# ---------------------------------------------------------------------------

@app.command("catch")
def catch(
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Request timeout in seconds (default from settings)."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the article instead of writing it to the clipboard."
    ),
) -> None:
    """Replace a copied link on the clipboard with the article it points to."""
    clipboard = SystemClipboard()

    async def _fetcher(target: str):
        if timeout is None:
            return await fetch_article(target)
        return await fetch_article(target, timeout=timeout)

    catcher = ArticleCatcher(clipboard, fetcher=_fetcher)
    try:
        url = catcher.on_foreground()
    except ClipboardError as exc:
        _fail(str(exc))

    if url is None:
        _fail("No URL found on the clipboard.")

    typer.echo(f"🌐 Fetching {url} …")
    if dry_run:
        result = asyncio.run(_fetcher(url))
    else:
        try:
            result = asyncio.run(catcher.fetch())
        except ClipboardError as exc:
            _fail(str(exc))

    if isinstance(result, Failure):
        _fail(result.message())

    if dry_run:
        typer.echo(result.text)
    else:
        typer.echo(f"✅ Copied {len(result.text)} characters of article text to the clipboard.")


@app.command("revert")
def revert(
    url: str = typer.Argument(..., help="URL to put back on the clipboard."),
) -> None:
    """Write URL back to the clipboard (undo a catch)."""
    detected = detect_url(url)
    if detected is None:
        _fail(f"Not a URL: {url}")
    try:
        SystemClipboard().write_text(detected)
    except ClipboardError as exc:
        _fail(str(exc))
    typer.echo(f"↩️  Clipboard reverted to {detected}")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()

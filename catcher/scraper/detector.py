"""URL detection inside arbitrary clipboard text."""

from __future__ import annotations

import re

import httpx

# Candidate hyperlinks: a scheme followed by ``://`` and a run of
# non-whitespace.  Each candidate is validated before it is accepted.
_CANDIDATE = re.compile(r"(?<![A-Za-z0-9+.\-])[A-Za-z][A-Za-z0-9+.\-]*://[^\s<>\"]+")

_TRAILING_PUNCT = ".,;:!?'\""
_BRACKETS = {")": "(", "]": "[", "}": "{"}


def _trim(candidate: str) -> str:
    """Drop sentence punctuation and unbalanced closing brackets from the end."""
    while candidate:
        last = candidate[-1]
        if last in _TRAILING_PUNCT:
            candidate = candidate[:-1]
        elif last in _BRACKETS and candidate.count(last) > candidate.count(_BRACKETS[last]):
            candidate = candidate[:-1]
        else:
            break
    return candidate


def _is_absolute(candidate: str) -> bool:
    """Return ``True`` if *candidate* parses into a URL with scheme and host."""
    try:
        url = httpx.URL(candidate)
    except (httpx.InvalidURL, ValueError):
        return False
    return bool(url.scheme) and bool(url.host)


def detect_url(text: str) -> str | None:
    """Return the first well-formed absolute URL found in *text*, else ``None``.

    Matching is not anchored: URLs embedded mid-sentence are found.  Candidates
    that fail to parse as absolute URLs are skipped and scanning continues
    with the next one.
    """
    if not text:
        return None
    for match in _CANDIDATE.finditer(text):
        candidate = _trim(match.group(0))
        if _is_absolute(candidate):
            return candidate
    return None

"""Centralised settings for Article Catcher.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("CATCHER_REQUEST_TIMEOUT", "30.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "CATCHER_USER_AGENT",
            "Mozilla/5.0 (compatible; ArticleCatcher/0.1)",
        )
    )
    follow_redirects: bool = field(
        default_factory=lambda: _env_bool("CATCHER_FOLLOW_REDIRECTS", "true")
    )
    max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("CATCHER_MAX_REDIRECTS", "20"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("CATCHER_LOG_LEVEL", "WARNING").upper()
    )

    @property
    def timeout_seconds(self) -> float | None:
        """The request timeout, or ``None`` when disabled (value ``<= 0``)."""
        return self.request_timeout if self.request_timeout > 0 else None


# Module-level singleton — import this everywhere:
#   from catcher.config import settings
settings = Settings()

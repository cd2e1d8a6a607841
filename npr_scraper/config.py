"""Environment-driven settings for a scrape run."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from .types import DEFAULT_LISTING_URL, MAX_ATTEMPTS, RESOURCE

_TRUTHY = {"1", "true", "yes", "on"}

# Chromium flags needed inside Lambda-style sandboxes (no /dev/shm, no setuid)
SERVERLESS_CHROMIUM_ARGS = (
    "--no-sandbox",
    "--single-process",
    "--no-zygote",
    "--disable-gpu",
    "--disable-dev-shm-usage",
)


def env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    return int(raw)


@dataclass
class BrowserSettings:
    headless: bool = True
    executable_path: Optional[str] = None
    serverless: bool = False
    args: list[str] = field(default_factory=list)


@dataclass
class ScraperSettings:
    listing_url: str = DEFAULT_LISTING_URL
    resource: str = RESOURCE
    listing_timeout_ms: int = 6000
    article_timeout_ms: int = 30000
    max_attempts: int = MAX_ATTEMPTS
    dry_run: bool = False
    output_path: Optional[str] = None
    browser: BrowserSettings = field(default_factory=BrowserSettings)

    @classmethod
    def from_env(cls) -> "ScraperSettings":
        serverless = bool(os.getenv("AWS_EXECUTION_ENV"))
        browser = BrowserSettings(
            headless=env_flag("HEADLESS", "1"),
            executable_path=os.getenv("CHROMIUM_EXECUTABLE_PATH") or None,
            serverless=serverless,
            args=list(SERVERLESS_CHROMIUM_ARGS) if serverless else [],
        )
        settings = cls(
            listing_url=os.getenv("NPR_LISTING_URL", "").strip()
            or DEFAULT_LISTING_URL,
            listing_timeout_ms=_env_int("LISTING_TIMEOUT_MS", 6000),
            article_timeout_ms=_env_int("ARTICLE_TIMEOUT_MS", 30000),
            max_attempts=_env_int("SCRAPER_MAX_ATTEMPTS", MAX_ATTEMPTS),
            dry_run=env_flag("SCRAPER_DRY_RUN"),
            output_path=os.getenv("SCRAPER_OUTPUT_PATH") or None,
            browser=browser,
        )
        if settings.max_attempts < 1:
            raise ValueError("SCRAPER_MAX_ATTEMPTS must be at least 1")
        return settings

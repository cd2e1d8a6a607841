"""Headless Chromium page renderer.

One browser and one page per run, navigated sequentially. Navigation failures
are reported as ``False`` from :meth:`PageRenderer.load`; whether that aborts
the run or consumes a retry is the caller's decision.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .config import BrowserSettings
from .logging_setup import LOGGER_NAME
from .scraper_observability import StepTimer, log_event
from .types import WAIT_DOM_PARSED, WAIT_NETWORK_IDLE

logger = logging.getLogger(LOGGER_NAME)

WAIT_CONDITIONS = (WAIT_DOM_PARSED, WAIT_NETWORK_IDLE)


class PageRenderer:
    def __init__(self, settings: Optional[BrowserSettings] = None) -> None:
        self.settings = settings or BrowserSettings()
        self._playwright: Any = None
        self._browser: Any = None
        self._page: Any = None

    def __enter__(self) -> "PageRenderer":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        launch_opts: dict[str, Any] = {
            "headless": self.settings.headless,
            "args": list(self.settings.args),
        }
        if self.settings.executable_path:
            launch_opts["executable_path"] = self.settings.executable_path

        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(**launch_opts)
            self._page = self._browser.new_page(ignore_https_errors=True)
        except Exception:
            self.close()
            raise
        logger.info(
            "Browser launched (headless=%s, serverless=%s)",
            self.settings.headless,
            self.settings.serverless,
        )

    def close(self) -> None:
        try:
            if self._browser is not None:
                self._browser.close()
        finally:
            self._browser = None
            self._page = None
            if self._playwright is not None:
                self._playwright.stop()
                self._playwright = None

    @property
    def page(self) -> Any:
        if self._page is None:
            raise RuntimeError("PageRenderer is not open")
        return self._page

    def load(self, url: str, wait: str, timeout_ms: int) -> bool:
        if wait not in WAIT_CONDITIONS:
            raise ValueError(f"Unknown wait condition: {wait}")
        timer = StepTimer()
        try:
            response = self.page.goto(url, wait_until=wait, timeout=timeout_ms)
        except PlaywrightError as exc:
            logger.warning("Navigation to %s failed: %s", url, exc)
            log_event(
                "FETCH",
                url=url,
                ok=False,
                error_type=type(exc).__name__,
                latency_ms=timer.elapsed_ms(),
            )
            return False
        log_event(
            "FETCH",
            url=url,
            ok=True,
            status=response.status if response is not None else None,
            latency_ms=timer.elapsed_ms(),
        )
        return True

    def query_all(self, selector: str) -> list[Any]:
        return self.page.query_selector_all(selector)

    def query_one(self, selector: str) -> Any:
        return self.page.query_selector(selector)

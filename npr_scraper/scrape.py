"""Scrape the NPR listing page and replace the stored NPR articles.

Listing failures and database failures abort the run. Per-article failures are
retried up to ``max_attempts`` and then dropped, so a failed article simply has
no row.
"""
from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, ContextManager, Optional

from sqlalchemy.engine import Engine

from .config import BrowserSettings, ScraperSettings
from .extract import extract_author, extract_body, extract_candidates, extract_media
from .logging_setup import LOGGER_NAME
from .scraper_observability import StepTimer, log_event, new_run_id, utc_now_iso
from .store import ArticleStore
from .transform import apply_article_fields, to_record
from .types import (
    WAIT_DOM_PARSED,
    WAIT_NETWORK_IDLE,
    ArticleCandidate,
    ArticleLoadError,
    ArticleRecord,
    ListingLoadError,
)

logger = logging.getLogger(LOGGER_NAME)

RendererFactory = Callable[[BrowserSettings], ContextManager[Any]]


@dataclass
class ScrapeResult:
    run_id: str
    url: str
    candidates: list[ArticleCandidate] = field(default_factory=list)
    records: list[ArticleRecord] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: int = 0
    dry_run: bool = False
    finished_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "url": self.url,
            "dry_run": self.dry_run,
            "finished_at": self.finished_at,
            "skipped": self.skipped,
            "failed": list(self.failed),
            "articles": [r.to_dict() for r in self.records],
        }


def _default_renderer_factory(settings: BrowserSettings) -> ContextManager[Any]:
    from .renderer import PageRenderer

    return PageRenderer(settings)


def build_records(
    candidates: list[ArticleCandidate],
    resource: str,
    rng: Optional[random.Random] = None,
) -> tuple[list[ArticleRecord], int]:
    """Turn complete candidates into records; incomplete ones are skipped."""
    records: list[ArticleRecord] = []
    skipped = 0
    for candidate in candidates:
        if not candidate.is_complete:
            skipped += 1
            logger.warning(
                "Skipping listing entry without headline or link: %r", candidate
            )
            continue
        records.append(to_record(candidate, resource=resource, rng=rng))
    return records, skipped


def scrape_article(
    renderer: Any, store: ArticleStore, record: ArticleRecord, timeout_ms: int
) -> None:
    """One attempt: render, extract, persist. Raises on article-level failure."""
    if not renderer.load(record.link, WAIT_NETWORK_IDLE, timeout_ms):
        raise ArticleLoadError(f"Failed to load {record.link}")

    media = extract_media(renderer)
    body_text = extract_body(renderer)
    author = extract_author(renderer)
    apply_article_fields(record, body_text=body_text, author=author, media=media)

    store.insert(record)


def scrape_with_retry(
    renderer: Any,
    store: ArticleStore,
    record: ArticleRecord,
    *,
    max_attempts: int,
    timeout_ms: int,
    run_id: str = "",
) -> bool:
    for attempt in range(1, max_attempts + 1):
        try:
            scrape_article(renderer, store, record, timeout_ms)
        except Exception as exc:
            logger.error(
                "Error processing article: %s, attempt %s: %s",
                record.headline,
                attempt,
                exc,
            )
            log_event(
                "RETRY",
                run_id=run_id,
                link=record.link,
                attempt=attempt,
                max_attempts=max_attempts,
                error_type=type(exc).__name__,
            )
            continue
        logger.info("Collected and saved data for article: %s", record.headline)
        return True

    logger.error(
        "Failed to load article after %s attempts: %s", max_attempts, record.link
    )
    return False


def scrape_listing(
    engine: Engine,
    url: Optional[str] = None,
    settings: Optional[ScraperSettings] = None,
    renderer_factory: Optional[RendererFactory] = None,
    rng: Optional[random.Random] = None,
) -> ScrapeResult:
    settings = settings or ScraperSettings.from_env()
    url = url or settings.listing_url
    renderer_factory = renderer_factory or _default_renderer_factory
    result = ScrapeResult(run_id=new_run_id(), url=url, dry_run=settings.dry_run)
    timer = StepTimer()

    log_event(
        "START",
        run_id=result.run_id,
        url=url,
        resource=settings.resource,
        dry_run=settings.dry_run,
    )
    try:
        with ArticleStore(engine, dry_run=settings.dry_run) as store, renderer_factory(
            settings.browser
        ) as renderer:
            logger.info("Navigating to %s", url)
            if not renderer.load(url, WAIT_DOM_PARSED, settings.listing_timeout_ms):
                raise ListingLoadError(f"Failed to load listing page {url}")

            result.candidates = extract_candidates(renderer, url)
            records, result.skipped = build_records(
                result.candidates, settings.resource, rng=rng
            )
            log_event(
                "PARSE",
                run_id=result.run_id,
                items_found=len(result.candidates),
                skipped=result.skipped,
            )

            store.clear_source(settings.resource)

            for record in records:
                ok = scrape_with_retry(
                    renderer,
                    store,
                    record,
                    max_attempts=settings.max_attempts,
                    timeout_ms=settings.article_timeout_ms,
                    run_id=result.run_id,
                )
                if ok:
                    result.records.append(record)
                else:
                    result.failed.append(record.headline)
    except Exception as exc:
        log_event(
            "END",
            run_id=result.run_id,
            success=False,
            error_type=type(exc).__name__,
            duration_ms=timer.elapsed_ms(),
        )
        raise

    result.finished_at = utc_now_iso()
    log_event(
        "END",
        run_id=result.run_id,
        success=True,
        rows_inserted=len(result.records),
        failed=len(result.failed),
        skipped=result.skipped,
        duration_ms=timer.elapsed_ms(),
    )
    return result


def write_output(result: ScrapeResult, path: str) -> Path:
    """Dump the run to a JSON side file for inspection."""
    out = Path(path)
    if out.parent and not out.parent.exists():
        out.parent.mkdir(parents=True, exist_ok=True)
    payload = result.to_dict()
    payload["candidates"] = [
        {"headline": c.headline, "link": c.link, "date": c.date}
        for c in result.candidates
    ]
    out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info("Wrote %s articles to %s", len(result.records), out)
    return out

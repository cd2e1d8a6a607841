"""Selector-based field extraction for NPR listing and article pages.

Field-level failures never propagate: media and author degrade to defaults,
and body returns ``None`` so the caller can blank the summary and body.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Protocol
from urllib.parse import urljoin

from .logging_setup import LOGGER_NAME
from .types import AUTHOR_PLACEHOLDER, ArticleCandidate

logger = logging.getLogger(LOGGER_NAME)

LISTING_ITEM = ".item"
LISTING_HEADLINE = ".title a"
LISTING_DATE = ".teaser time"

MEDIA_IMAGE = "div.imagewrap.has-source-dimensions picture img"
BODY_PARAGRAPHS = "#storytext p"

# Most specific first; the bare class also matches unlinked bylines
AUTHOR_SELECTORS = (
    ".byline__name a",
    ".byline__name.byline__name--block",
    ".byline__name",
)


class Renderer(Protocol):
    def query_all(self, selector: str) -> list[Any]: ...

    def query_one(self, selector: str) -> Any: ...


def _clean(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


def _candidate_from_item(item: Any, base_url: str) -> ArticleCandidate:
    anchor = item.query_selector(LISTING_HEADLINE)
    headline = link = date = None
    if anchor is not None:
        headline = _clean(anchor.inner_text())
        href = _clean(anchor.get_attribute("href"))
        link = urljoin(base_url, href) if href else href
    time_el = item.query_selector(LISTING_DATE)
    if time_el is not None:
        date = _clean(time_el.get_attribute("datetime"))
    return ArticleCandidate(headline=headline, link=link, date=date)


def extract_candidates(renderer: Renderer, base_url: str) -> list[ArticleCandidate]:
    """Return one candidate per listing item, complete or not."""
    return [
        _candidate_from_item(item, base_url)
        for item in renderer.query_all(LISTING_ITEM)
    ]


def extract_media(renderer: Renderer) -> str:
    try:
        img = renderer.query_one(MEDIA_IMAGE)
        src = img.get_attribute("src") if img is not None else None
    except Exception as exc:
        logger.warning("Error finding media content: %s", exc)
        return ""
    if not src:
        logger.info("No media image on page")
        return ""
    return src.strip()


def extract_body(renderer: Renderer) -> Optional[str]:
    """Paragraph text joined by blank lines, or None when extraction fails."""
    try:
        paragraphs = [p.inner_text().strip() for p in renderer.query_all(BODY_PARAGRAPHS)]
    except Exception as exc:
        logger.warning("Error finding body content: %s", exc)
        return None
    return "\n\n".join(paragraphs)


def first_success(strategies: Iterable[Callable[[], Optional[str]]]) -> Optional[str]:
    """Run strategies in order; the first non-empty result wins.

    A strategy that raises counts as a miss.
    """
    for strategy in strategies:
        try:
            value = strategy()
        except Exception as exc:
            logger.debug("Extraction strategy failed: %s", exc)
            continue
        if value:
            return value
    return None


def _text_of(renderer: Renderer, selector: str) -> Callable[[], Optional[str]]:
    def strategy() -> Optional[str]:
        el = renderer.query_one(selector)
        if el is None:
            return None
        return _clean(el.inner_text())

    return strategy


def extract_author(renderer: Renderer) -> str:
    author = first_success(_text_of(renderer, sel) for sel in AUTHOR_SELECTORS)
    if author is None:
        logger.warning("Error finding author; using placeholder")
        return AUTHOR_PLACEHOLDER
    return author

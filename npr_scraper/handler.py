"""Function-as-a-service entry point.

``handler(event, context)`` accepts an optional ``url`` in the event and
returns ``{"statusCode": ..., "body": <json>}``.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from dotenv import load_dotenv

from .config import ScraperSettings
from .logging_setup import LOGGER_NAME, setup_logging
from .types import ListingLoadError

logger = logging.getLogger(LOGGER_NAME)


def _response(status_code: int, body: Any) -> dict[str, Any]:
    return {"statusCode": status_code, "body": json.dumps(body, default=str)}


def handler(
    event: Optional[dict[str, Any]],
    context: Any = None,
    *,
    engine=None,
    renderer_factory=None,
) -> dict[str, Any]:
    load_dotenv()
    setup_logging()

    try:
        settings = ScraperSettings.from_env()
    except ValueError as exc:
        logger.error("Invalid scraper configuration: %s", exc)
        return _response(500, "Invalid scraper configuration")

    event = event or {}
    url = event.get("url") or settings.listing_url
    if not url:
        return _response(400, "URL is required")

    from .scrape import scrape_listing

    try:
        if engine is None:
            from .db import get_engine

            engine = get_engine()
        result = scrape_listing(
            engine, url=url, settings=settings, renderer_factory=renderer_factory
        )
    except ListingLoadError as exc:
        logger.error("Failed to load listing page: %s", exc)
        return _response(500, "Failed to load the website")
    except Exception:
        logger.exception("Error during scraping")
        return _response(500, "An error occurred during scraping")

    body = result.to_dict()
    body["message"] = "Scraping completed successfully"
    return _response(200, body)

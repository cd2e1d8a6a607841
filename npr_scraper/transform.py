from __future__ import annotations

import logging
import random
import re
import uuid
from datetime import datetime
from typing import Optional

from .logging_setup import LOGGER_NAME
from .types import (
    RESOURCE,
    SLUG_SUFFIX_MAX,
    SUMMARY_WORDS,
    ArticleCandidate,
    ArticleRecord,
    IncompleteCandidateError,
)

logger = logging.getLogger(LOGGER_NAME)

_NON_ALPHA = re.compile(r"[^a-z]")

# "2024-01-01T12:00:00" has no fractional seconds; the table stores millis
_NO_FRACTION_LEN = 19


def new_article_id() -> str:
    return uuid.uuid4().hex


def make_slug(headline: str, rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    base = "".join(headline.split()[:3]).lower()
    base = _NON_ALPHA.sub("", base)
    return f"{base}-{rng.randint(1, SLUG_SUFFIX_MAX)}"


def make_summary(body_text: Optional[str]) -> str:
    if not body_text:
        return ""
    words = body_text.split()
    if not words:
        return ""
    return " ".join(words[:SUMMARY_WORDS]) + "..."


def build_body_html(
    body_text: Optional[str], link: Optional[str], resource: str = RESOURCE
) -> str:
    if body_text:
        return (
            f"<p>{body_text}</p><br><br>"
            f"<ul><li><a href='{link}'>Visit {resource}</a></li></ul>"
        )
    if link:
        return f"<br><br><ul><li><a href='{link}'>Visit article @ {resource}</a></li></ul>"
    return ""


def parse_published_at(raw: Optional[str]) -> Optional[datetime]:
    """Parse the listing's ``datetime`` attribute (ISO 8601)."""
    if not raw:
        return None
    value = raw.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def normalize_date(raw: Optional[str]) -> Optional[str]:
    """Pad second-precision timestamps to milliseconds.

    A parseable 19-character timestamp is re-rendered from the parsed value
    with millisecond precision. Unparseable 19-character strings still get
    ".000" appended, and every other length passes through untouched.
    """
    if raw is None:
        return None
    parsed = parse_published_at(raw)
    if raw and parsed is None:
        logger.warning("Unparseable publication date %r", raw)
    if len(raw) != _NO_FRACTION_LEN:
        return raw
    if parsed is not None and parsed.tzinfo is None:
        return parsed.isoformat(sep=raw[10], timespec="milliseconds")
    return raw + ".000"


def to_record(
    candidate: ArticleCandidate,
    resource: str = RESOURCE,
    rng: Optional[random.Random] = None,
) -> ArticleRecord:
    if not candidate.is_complete:
        raise IncompleteCandidateError(
            f"Listing entry missing headline or link: {candidate!r}"
        )
    headline = candidate.headline.strip()
    return ArticleRecord(
        id=new_article_id(),
        slug=make_slug(headline, rng=rng),
        headline=headline,
        link=candidate.link.strip(),
        date=normalize_date(candidate.date) or "",
        resource=resource,
    )


def apply_article_fields(
    record: ArticleRecord,
    *,
    body_text: Optional[str],
    author: str,
    media: str,
) -> ArticleRecord:
    # body_text None means extraction failed: blank both fields
    if body_text is None:
        record.summary = ""
        record.body = ""
    else:
        record.summary = make_summary(body_text)
        record.body = build_body_html(body_text, record.link, record.resource)
    record.author = author
    record.media = media
    return record

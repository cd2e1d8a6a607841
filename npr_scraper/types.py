from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional


RESOURCE = "NPR"
DEFAULT_LISTING_URL = "https://www.npr.org/sections/news/"

AUTHOR_PLACEHOLDER = "See article for details"

# Per-article attempts before the candidate is dropped
MAX_ATTEMPTS = 3

SUMMARY_WORDS = 25
SLUG_SUFFIX_MAX = 2000

WAIT_DOM_PARSED = "domcontentloaded"
WAIT_NETWORK_IDLE = "networkidle"

ARTICLE_TABLE = '"Article"'
ARTICLE_COLUMNS = (
    "id",
    "slug",
    "headline",
    "summary",
    "body",
    "author",
    "resource",
    "media",
    "link",
    "date",
)


class ScraperError(Exception):
    """Base error for the scraper."""


class ListingLoadError(ScraperError):
    """The listing page could not be rendered; the run is aborted."""


class ArticleLoadError(ScraperError):
    """An article page did not render within its timeout."""


class IncompleteCandidateError(ScraperError):
    """A listing entry is missing its headline or link."""


@dataclass
class ArticleCandidate:
    headline: Optional[str]
    link: Optional[str]
    date: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.headline and self.headline.strip()) and bool(
            self.link and self.link.strip()
        )


@dataclass
class ArticleRecord:
    id: str
    slug: str
    headline: str
    link: str
    date: str
    resource: str = RESOURCE
    summary: str = ""
    body: str = ""
    author: str = ""
    media: str = ""

    def to_row(self) -> dict[str, Optional[str]]:
        row: dict[str, Optional[str]] = {
            col: getattr(self, col) or "" for col in ARTICLE_COLUMNS
        }
        # Empty strings are not valid timestamps
        row["date"] = self.date or None
        return row

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

"""Lambda entry point (handler path: app.handler)."""
from npr_scraper.handler import handler

__all__ = ["handler"]

"""In-memory stand-ins for the Playwright-backed renderer."""
from __future__ import annotations


class FakeElement:
    def __init__(self, text="", attrs=None, children=None, raises=None):
        self.text = text
        self.attrs = attrs or {}
        self.children = children or {}
        self.raises = raises

    def inner_text(self):
        if self.raises:
            raise self.raises
        return self.text

    def get_attribute(self, name):
        if self.raises:
            raise self.raises
        return self.attrs.get(name)

    def query_selector(self, selector):
        return self.children.get(selector)


def listing_item(headline, href, date=None):
    children = {}
    if headline is not None or href is not None:
        children[".title a"] = FakeElement(text=headline or "", attrs={"href": href})
    if date is not None:
        children[".teaser time"] = FakeElement(attrs={"datetime": date})
    return FakeElement(children=children)


class FakeRenderer:
    """Serves canned pages keyed by URL.

    ``pages`` maps url -> {selector: [elements]}; a url mapped to None (or
    missing) fails to load. ``fail_first`` maps url -> number of loads that
    fail before the page is served.
    """

    def __init__(self, pages, fail_first=None):
        self.pages = pages
        self.fail_first = dict(fail_first or {})
        self.loads = []
        self.current = {}
        self.entered = False
        self.closed = False

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True

    def factory(self, browser_settings):
        return self

    def load(self, url, wait, timeout_ms):
        self.loads.append((url, wait, timeout_ms))
        if self.fail_first.get(url, 0) > 0:
            self.fail_first[url] -= 1
            return False
        page = self.pages.get(url)
        if page is None:
            return False
        self.current = page
        return True

    def load_count(self, url):
        return sum(1 for u, _, _ in self.loads if u == url)

    def query_all(self, selector):
        return list(self.current.get(selector, []))

    def query_one(self, selector):
        items = self.current.get(selector) or []
        return items[0] if items else None

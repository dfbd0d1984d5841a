# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections import Counter
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import pytest

from site_walker.crawler.models import LinkRef, Loaded, LoadError, PageOutcome

#: Site used by the full-crawl tests; all links are already canonical.
BASE_URL = "http://www.notrealsite.org"
BASE_URL_SECURE = "https://www.notrealsite.org"
BOOTSTRAP_CSS = "https://maxcdn.bootstrapcdn.com/bootstrap/3.3.7/css/bootstrap.min.css"


def page(
    *links: str,
    title: Optional[str] = "",
    imports: Iterable[str] = (),
    media: Iterable[Tuple[str, str]] = (),
) -> Loaded:
    """Build a Loaded outcome whose anchors point at *links*."""
    return Loaded(
        title=title,
        imports=[LinkRef("link", u) for u in imports],
        media=[LinkRef(tag, u) for tag, u in media],
        links=[LinkRef("a", u) for u in links],
    )


class FakeFetcher:
    """
    In-memory fetcher serving a fixed site graph.

    Counts calls per URL and how many fetches were interrupted by cancellation.
    URLs in *block* never return unless cancelled.
    """

    def __init__(
        self,
        pages: Dict[str, PageOutcome],
        delay: float = 0.0,
        block: Iterable[str] = (),
    ) -> None:
        self.pages = pages
        self.delay = delay
        self.block = set(block)
        self.calls: Counter[str] = Counter()
        self.interrupts = 0
        self.on_fetch: Optional[Callable[[str], None]] = None

    async def __aenter__(self) -> FakeFetcher:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def fetch(self, url: str) -> PageOutcome:
        self.calls[url] += 1
        if self.on_fetch is not None:
            self.on_fetch(url)
        try:
            if url in self.block:
                await asyncio.Event().wait()
            elif self.delay:
                await asyncio.sleep(self.delay)
            else:
                await asyncio.sleep(0)
        except asyncio.CancelledError:
            self.interrupts += 1
            raise
        outcome = self.pages.get(url)
        if outcome is None:
            raise LookupError(f"No details for {url}")
        return outcome


class EventRecorder:
    """Event handler that keeps every notification in arrival order."""

    def __init__(self) -> None:
        self.events: List[tuple] = []

    def on_progress(self, processed_count: int) -> None:
        self.events.append(("progress", processed_count))

    def on_complete(self, processed_count: int, canceled: bool) -> None:
        self.events.append(("complete", processed_count, canceled))

    @property
    def progress(self) -> List[int]:
        return [e[1] for e in self.events if e[0] == "progress"]

    @property
    def completions(self) -> List[Tuple[int, bool]]:
        return [(e[1], e[2]) for e in self.events if e[0] == "complete"]


def notrealsite_pages() -> Dict[str, PageOutcome]:
    """Six-page site with a cycle, external links, an empty page and a broken page."""
    return {
        BASE_URL: page(
            f"{BASE_URL}/login.html",
            f"{BASE_URL}/about.html",
            "http://www.google.com",
            title="Home",
            imports=[BOOTSTRAP_CSS],
            media=[("img", f"{BASE_URL}/img/home.jpg"), ("script", f"{BASE_URL}/js/home.js")],
        ),
        f"{BASE_URL}/login.html": page(
            BASE_URL,
            f"{BASE_URL}/admin/one.html",
            "http://www.microsoft.com/somepage.html",
            title="Login",
            imports=[BOOTSTRAP_CSS],
            media=[("img", f"{BASE_URL}/img/login.jpg"), ("script", f"{BASE_URL}/js/login.js")],
        ),
        f"{BASE_URL}/about.html": page(
            BASE_URL,
            title="About",
            imports=[BOOTSTRAP_CSS],
            media=[("img", f"{BASE_URL}/img/about.jpg"), ("script", f"{BASE_URL}/js/about.js")],
        ),
        f"{BASE_URL}/admin/one.html": page(
            BASE_URL,
            f"{BASE_URL}/about.html",
            f"{BASE_URL}/admin/two.html",
            f"{BASE_URL}/admin/three.html",
            f"{BASE_URL_SECURE}/admin/four.html",
            title="Admin One",
        ),
        f"{BASE_URL}/admin/two.html": Loaded(title=None),
        f"{BASE_URL}/admin/three.html": LoadError("Unable to load page."),
    }


@pytest.fixture()
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture()
def site_fetcher() -> FakeFetcher:
    return FakeFetcher(notrealsite_pages())

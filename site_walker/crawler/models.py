# site_walker/crawler/models.py
"""
Data models for the SiteWalker crawler.

A page moves through exactly one transition, ``Pending`` to either ``Loaded``
or ``LoadError``; :class:`~site_walker.crawler.frontier.Frontier` enforces it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Tuple, Union

__all__ = (
    "LinkRef",
    "Pending",
    "PENDING",
    "Loaded",
    "LoadError",
    "PageOutcome",
    "PageRecord",
    "CrawlPage",
    "CrawlResult",
    "NOT_PARSED",
)

NOT_PARSED = "Not parsed."


@dataclass(frozen=True, slots=True)
class LinkRef:
    """An outbound reference and the element (``a``, ``link``, ``img``…) that carried it."""

    tag: str
    url: str


@dataclass(frozen=True, slots=True)
class Pending:
    """Fetch not yet run."""


PENDING = Pending()


def _unique(links: Iterable[LinkRef]) -> Tuple[LinkRef, ...]:
    return tuple(dict.fromkeys(links))


@dataclass(frozen=True, slots=True)
class Loaded:
    """Successful fetch: title plus references classified by element kind."""

    title: Optional[str] = None
    imports: Tuple[LinkRef, ...] = ()
    media: Tuple[LinkRef, ...] = ()
    links: Tuple[LinkRef, ...] = ()

    def __post_init__(self) -> None:
        # Any iterable is accepted; stored as an ordered set.
        object.__setattr__(self, "imports", _unique(self.imports))
        object.__setattr__(self, "media", _unique(self.media))
        object.__setattr__(self, "links", _unique(self.links))


@dataclass(frozen=True, slots=True)
class LoadError:
    """The page could not be fetched or parsed."""

    message: str


PageOutcome = Union[Pending, Loaded, LoadError]


@dataclass(slots=True)
class PageRecord:
    """Canonical URL and what the crawl learned about it."""

    url: str
    outcome: PageOutcome = PENDING

    @property
    def is_pending(self) -> bool:
        return isinstance(self.outcome, Pending)


@dataclass(slots=True)
class CrawlPage:
    """A page record translated for reporting, links split by origin."""

    url: str
    title: Optional[str] = None
    load_error: Optional[str] = None
    internal_links: List[str] = field(default_factory=list)
    external_links: List[str] = field(default_factory=list)
    content_links: List[str] = field(default_factory=list)


@dataclass(slots=True)
class CrawlResult:
    """Aggregate outcome of one crawl run."""

    seed_url: str
    origin: str
    start_time: Optional[datetime]
    duration: float
    canceled: bool
    processed_count: int
    pages: List[CrawlPage] = field(default_factory=list)

    def page(self, url: str) -> Optional[CrawlPage]:
        """Returns the page whose canonical URL is *url*, if it was discovered."""
        for page in self.pages:
            if page.url == url:
                return page
        return None

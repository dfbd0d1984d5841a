# File: site_walker/aggregator.py
"""site_walker.aggregator: turns a crawl result into a report."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, TypedDict

from site_walker.crawler.models import CrawlResult


class PageInfo(TypedDict, total=False):
    """One page of the report."""

    url: str
    title: Optional[str]
    load_error: Optional[str]
    internal_links: List[str]
    external_links: List[str]
    content_links: List[str]


@dataclass(slots=True)
class CrawlReport:
    """Everything written to a report file."""

    starting_url: str
    start_time: Optional[datetime] = None
    duration: float = 0.0
    canceled: bool = False
    pages_processed: int = 0
    pages: List[PageInfo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["start_time"] = self.start_time.isoformat() if self.start_time else None
        return data

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation of the report."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def aggregate_result(starting_url: str, result: CrawlResult) -> CrawlReport:
    """Builds a CrawlReport from an engine result."""
    pages: List[PageInfo] = [
        {
            "url": page.url,
            "title": page.title,
            "load_error": page.load_error,
            "internal_links": list(page.internal_links),
            "external_links": list(page.external_links),
            "content_links": list(page.content_links),
        }
        for page in result.pages
    ]
    return CrawlReport(
        starting_url=starting_url,
        start_time=result.start_time,
        duration=result.duration,
        canceled=result.canceled,
        pages_processed=result.processed_count,
        pages=pages,
    )

# site_walker/crawler/errors.py
"""
Usage errors raised synchronously by the crawl engine.
"""
from __future__ import annotations

from typing import Optional


class MalformedURLError(ValueError):
    """The seed URL cannot be parsed into scheme, host and port."""

    def __init__(self, url: Optional[str], reason: str = "") -> None:
        self.url = url
        self.reason = reason
        message = f"Malformed URL: {url!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class CrawlStateError(RuntimeError):
    """An engine operation was called in a state that does not allow it."""

# site_walker/crawler/fetcher.py
"""
Fetcher module: loads a page over HTTP and turns it into a page outcome.

Every failure (HTTP status, timeout, connection error, non-HTML content) is
returned as :class:`LoadError`; nothing is retried. Cancelling the task that
awaits :meth:`HttpFetcher.fetch` aborts the request and closes its connection,
which is how the crawl engine interrupts blocked fetches.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Protocol, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_walker.crawler.models import LoadError, PageOutcome
from site_walker.logger import logger
from site_walker.parser.html_parser import parse_page

__all__ = ("PageFetcher", "HttpFetcher", "DEFAULT_USER_AGENT", "HTML_CONTENT_TYPES")

DEFAULT_USER_AGENT = "SiteWalker/1.0"
HTML_CONTENT_TYPES: Sequence[str] = ("text/html", "application/xhtml+xml")


class PageFetcher(Protocol):
    """What the crawl engine needs from a fetcher. Must never return ``None``."""

    async def fetch(self, url: str) -> PageOutcome:
        ...


def load_error(url: str, cause: object) -> LoadError:
    return LoadError(f"Unable to load {url}. CAUSE: {cause}")


class HttpFetcher:
    """Fetches pages with a shared aiohttp session."""

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> HttpFetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.timeout if self.timeout > 0 else None),
                headers={"User-Agent": self.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
        if self._owns_session:
            self.session = None

    async def fetch(self, url: str) -> PageOutcome:
        """
        Fetch *url*, following redirects.

        Returns ``Loaded`` for an HTML page, ``LoadError`` otherwise.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")

        try:
            async with self.session.get(url, allow_redirects=True) as resp:
                if resp.status >= 400:
                    return load_error(url, f"HTTP {resp.status} {resp.reason or ''}".rstrip())
                mime = resp.content_type.lower()
                if mime not in HTML_CONTENT_TYPES:
                    return load_error(url, f"unsupported content type {mime!r}")
                body = await resp.read()
                final_url = str(resp.url)
                charset = resp.charset
        except asyncio.TimeoutError:
            logger.warning("Timed out loading %s", url)
            return load_error(url, "timeout")
        except (ClientError, ValueError) as exc:
            logger.warning("Failed %s: %s", url, exc)
            return load_error(url, repr(exc))

        html: str | bytes = body
        if charset:
            try:
                html = body.decode(charset, errors="replace")
            except LookupError:
                logger.debug("Unknown charset %r for %s, letting the parser detect it", charset, url)
        return parse_page(html, final_url)

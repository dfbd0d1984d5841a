# === FILE: site_walker/crawler/crawler.py ===
"""
Concurrent crawl engine.

A fixed pool of worker tasks drains a queue of canonical URLs. Each URL is
queued exactly once, by the worker whose :meth:`Frontier.try_register` call
inserted it. A worker fetches its page, records the outcome, registers and
queues the page's in-origin links, and only then increments the processed
counter. Because registration always precedes the increment, the crawl is
quiescent exactly when ``processed_count == frontier.size()``; the worker
that observes the equality fires completion.
"""
from __future__ import annotations

import asyncio
import threading
import time
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from site_walker.crawler.errors import CrawlStateError
from site_walker.crawler.events import EventHandler
from site_walker.crawler.fetcher import PageFetcher, load_error
from site_walker.crawler.frontier import Frontier
from site_walker.crawler.models import (
    NOT_PARSED,
    CrawlPage,
    CrawlResult,
    Loaded,
    LoadError,
    PageOutcome,
    PageRecord,
)
from site_walker.logger import logger
from site_walker.utils import canonical_url, is_in_origin, origin_of, remove_duplicates

__all__ = ("CrawlState", "CrawlEngine")


class CrawlState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELED = "canceled"


class CrawlEngine:
    """Crawls every page reachable from a seed URL within the seed's origin.

    One instance runs one crawl. ``start`` must be called from inside a
    running event loop; it schedules the work and returns immediately.
    """

    MIN_WORKERS = 1
    CANCEL_GRACE_PERIOD = 10.0

    def __init__(
        self,
        fetcher: PageFetcher,
        num_workers: int = 1,
        progress_interval: float = 0.0,
        *,
        cancel_grace: float = CANCEL_GRACE_PERIOD,
    ) -> None:
        if fetcher is None:
            raise ValueError("Null fetcher.")

        self._fetcher = fetcher
        self.num_workers = max(self.MIN_WORKERS, int(num_workers))
        self.progress_interval = float(progress_interval)
        self.cancel_grace = cancel_grace

        self._state = CrawlState.NOT_STARTED
        self._seed: Optional[str] = None
        self._origin: Optional[str] = None
        self._frontier: Optional[Frontier] = None
        self._queue: Optional[asyncio.Queue[str]] = None
        self._workers: List[asyncio.Task[None]] = []
        self._pool: Optional[asyncio.Future] = None
        self._handler: Optional[EventHandler] = None

        self._processed = 0
        self._canceled = False
        self._closed = False
        self._start_time: Optional[datetime] = None
        self._started_at = 0.0
        self._last_progress = 0.0
        self._duration = 0.0
        # Guards completion and progress emission only; never held across an await.
        self._event_lock = threading.Lock()

    # ------------------------------------------------------------------ #
    # Public surface                                                     #
    # ------------------------------------------------------------------ #

    def start(self, seed_url: str, event_handler: Optional[EventHandler] = None) -> None:
        """Validates *seed_url* and schedules its crawl without blocking.

        Raises :class:`CrawlStateError` on a second call and
        :class:`MalformedURLError` if the seed has no usable scheme/host/port.
        """
        if self._state is not CrawlState.NOT_STARTED:
            raise CrawlStateError("The crawler is already started.")

        seed = canonical_url(seed_url)
        origin = origin_of(seed)
        loop = asyncio.get_running_loop()

        self._state = CrawlState.RUNNING
        self._seed = seed
        self._origin = origin
        self._handler = event_handler
        self._frontier = Frontier()
        self._queue = asyncio.Queue()
        self._start_time = datetime.now(timezone.utc)
        self._started_at = self._last_progress = time.monotonic()

        self._frontier.try_register(seed)
        self._queue.put_nowait(seed)

        self._workers = [
            loop.create_task(self._worker(), name=f"crawler-{i}")
            for i in range(1, self.num_workers + 1)
        ]
        self._pool = asyncio.gather(*self._workers, return_exceptions=True)
        logger.info("Crawl started: %s (origin %s, %d workers)", seed, origin, self.num_workers)

    async def wait(self, timeout: Optional[float] = None) -> bool:
        """Waits up to *timeout* seconds for the worker pool to terminate.

        Returns True if it terminated, or if the crawl was never started.
        """
        if self._pool is None:
            return True
        done, _ = await asyncio.wait({self._pool}, timeout=timeout)
        return bool(done)

    async def cancel(self) -> bool:
        """Interrupts in-flight fetches and stops the pool.

        Returns False if a worker did not unwind within the grace period; the
        crawl is then left running and its result must not be trusted.
        """
        if self._state is not CrawlState.RUNNING:
            return True

        self._canceled = True
        self._closed = True
        for task in self._workers:
            task.cancel()

        _, pending = await asyncio.wait(self._workers, timeout=self.cancel_grace)
        if pending:
            logger.error(
                "Unable to cancel crawl of %s: %d worker(s) still running after %.1f s",
                self._seed,
                len(pending),
                self.cancel_grace,
            )
            return False

        self._complete()
        return True

    def get_result(self) -> CrawlResult:
        """Builds the crawl result from the frontier once the crawl is over."""
        if self._state is CrawlState.NOT_STARTED:
            raise CrawlStateError("The crawler has not started.")
        if self._state is CrawlState.RUNNING:
            raise CrawlStateError("The crawler is running.")

        return CrawlResult(
            seed_url=self._seed,
            origin=self._origin,
            start_time=self._start_time,
            duration=self._duration,
            canceled=self._canceled,
            processed_count=self._processed,
            pages=[self._to_crawl_page(record) for record in self._frontier.snapshot()],
        )

    @property
    def state(self) -> CrawlState:
        return self._state

    @property
    def start_time(self) -> Optional[datetime]:
        return self._start_time

    @property
    def duration(self) -> float:
        """Seconds from start to completion; 0.0 until completion fires."""
        return self._duration

    @property
    def canceled(self) -> bool:
        return self._canceled

    @property
    def processed_count(self) -> int:
        return self._processed

    @property
    def origin(self) -> Optional[str]:
        return self._origin

    @property
    def frontier_size(self) -> int:
        return self._frontier.size() if self._frontier is not None else 0

    # ------------------------------------------------------------------ #
    # Worker pool                                                        #
    # ------------------------------------------------------------------ #

    async def _worker(self) -> None:
        while not self._closed:
            url = await self._queue.get()
            try:
                await self._process_page(url)
            except Exception:
                logger.exception("Error processing %s", url)

    async def _process_page(self, url: str) -> None:
        try:
            outcome: PageOutcome = await self._fetcher.fetch(url)
        except Exception as exc:
            logger.exception("Fetcher failed on %s", url)
            outcome = load_error(url, repr(exc))

        if self._canceled:
            return

        if not isinstance(outcome, (Loaded, LoadError)):
            logger.error("Fetcher returned %r for %s", outcome, url)
            outcome = load_error(url, "no page outcome")

        self._frontier.complete(url, outcome)

        new_links = 0
        if isinstance(outcome, Loaded):
            for link in outcome.links:
                link_url = canonical_url(link.url)
                if is_in_origin(link_url, self._origin) and self._frontier.try_register(link_url):
                    self._queue.put_nowait(link_url)
                    new_links += 1

        self._processed += 1
        processed = self._processed
        size = self._frontier.size()
        logger.debug(
            "Processed %s - processed: %d, new links: %d, frontier: %d", url, processed, new_links, size
        )

        if processed == size:
            self._complete()
        else:
            self._notify_progress()

    def _shutdown(self) -> None:
        self._closed = True
        current = asyncio.current_task()
        for task in self._workers:
            if task is not current and not task.done():
                task.cancel()

    # ------------------------------------------------------------------ #
    # Event protocol                                                     #
    # ------------------------------------------------------------------ #

    def _complete(self) -> None:
        """Fires completion once; later calls are no-ops."""
        with self._event_lock:
            if self._state is not CrawlState.RUNNING:
                return
            self._duration = time.monotonic() - self._started_at
            self._state = CrawlState.CANCELED if self._canceled else CrawlState.COMPLETED
            logger.info(
                "Crawl %s: %d pages in %.2f s",
                self._state.value,
                self._processed,
                self._duration,
            )
            if self._handler is not None:
                try:
                    self._handler.on_complete(self._processed, self._canceled)
                except Exception:
                    logger.exception("Event handler failed on completion")
        self._shutdown()

    def _notify_progress(self) -> None:
        if self._handler is None or self.progress_interval <= 0:
            return
        with self._event_lock:
            if self._state is not CrawlState.RUNNING:
                return
            now = time.monotonic()
            if now - self._last_progress < self.progress_interval:
                return
            self._last_progress = now
            try:
                self._handler.on_progress(self._processed)
            except Exception:
                logger.exception("Event handler failed on progress")

    # ------------------------------------------------------------------ #
    # Result translation                                                 #
    # ------------------------------------------------------------------ #

    def _to_crawl_page(self, record: PageRecord) -> CrawlPage:
        page = CrawlPage(url=record.url)
        outcome = record.outcome
        if isinstance(outcome, LoadError):
            page.load_error = outcome.message
        elif isinstance(outcome, Loaded):
            page.title = outcome.title
            internal: List[str] = []
            external: List[str] = []
            for link in outcome.links:
                link_url = canonical_url(link.url)
                (internal if is_in_origin(link_url, self._origin) else external).append(link_url)
            page.internal_links = remove_duplicates(internal)
            page.external_links = remove_duplicates(external)
            page.content_links = remove_duplicates(
                canonical_url(link.url) for link in (*outcome.imports, *outcome.media)
            )
        else:
            page.load_error = NOT_PARSED
        return page

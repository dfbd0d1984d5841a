# File: site_walker/engine.py
"""site_walker.engine: crawl-and-report orchestration used by the CLI and tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Union

from pydantic import ValidationError

from site_walker.aggregator import aggregate_result
from site_walker.config import CrawlConfig, describe_errors
from site_walker.crawler.crawler import CrawlEngine
from site_walker.crawler.errors import MalformedURLError
from site_walker.crawler.events import CrawlServiceObserver
from site_walker.crawler.fetcher import HttpFetcher
from site_walker.logger import logger
from site_walker.report import save_report

__all__ = ["CrawlReportService", "run_crawl"]

Settings = Union[CrawlConfig, Mapping[str, Any]]
FetcherFactory = Callable[[CrawlConfig], Any]


def _http_fetcher(config: CrawlConfig) -> HttpFetcher:
    return HttpFetcher(timeout=config.parse_timeout, user_agent=config.user_agent)


class CrawlReportService:
    """Validates settings, runs one crawl and saves its report.

    *fetcher_factory* builds an async context manager yielding a page fetcher;
    tests inject fakes through it.
    """

    def __init__(self, fetcher_factory: FetcherFactory = _http_fetcher) -> None:
        self._fetcher_factory = fetcher_factory
        self._observers: List[CrawlServiceObserver] = []

    def add_observer(self, observer: CrawlServiceObserver) -> None:
        if observer is None:
            raise ValueError("Null observer.")
        self._observers.append(observer)

    # Engine-facing event handler: progress is forwarded, completion is
    # reported by run() once the report has been written.
    def on_progress(self, processed_count: int) -> None:
        self._notify("on_progress", processed_count)

    def on_complete(self, processed_count: int, canceled: bool) -> None:
        logger.debug("Engine finished: %d pages, canceled=%s", processed_count, canceled)

    async def run(self, settings: Settings) -> Optional[Path]:
        """Runs the crawl; returns the report path, or None if it could not be produced."""
        config = self._validate(settings)
        if config is None:
            return None

        starting_url = str(config.starting_url)
        self._notify("on_start", starting_url)

        async with self._fetcher_factory(config) as fetcher:
            engine = CrawlEngine(fetcher, config.num_workers, config.progress_interval)
            try:
                engine.start(starting_url, self)
            except MalformedURLError as exc:
                self._notify("on_error", [str(exc)])
                return None

            if not await engine.wait(config.crawl_timeout):
                logger.warning("Crawl did not finish within %.0f s, canceling", config.crawl_timeout)
                if not await engine.cancel():
                    logger.error("Cancel after crawl timeout failed.")
                    self._notify("on_error", ["Cancel after crawl timeout failed."])
                    return None

            report = aggregate_result(starting_url, engine.get_result())

        try:
            path = save_report(report, config.report_path)
        except OSError as exc:
            logger.error("Saving report failed: %s", exc)
            self._notify("on_error", [f"Unable to save report: {exc}"])
            return None

        path = path.resolve()
        logger.info("Report saved: %s", path)
        self._notify("on_complete", report.pages_processed, report.canceled, str(path))
        return path

    def _validate(self, settings: Settings) -> Optional[CrawlConfig]:
        if isinstance(settings, CrawlConfig):
            return settings
        try:
            return CrawlConfig(**dict(settings))
        except ValidationError as exc:
            self._notify("on_error", describe_errors(exc))
            return None

    def _notify(self, event: str, *args: Any) -> None:
        for observer in self._observers:
            try:
                getattr(observer, event)(*args)
            except Exception:
                logger.exception("Observer %r failed on %s", observer, event)


async def run_crawl(
    settings: Settings,
    observer: Optional[CrawlServiceObserver] = None,
    fetcher_factory: FetcherFactory = _http_fetcher,
) -> Optional[Path]:
    """Functional wrapper around :class:`CrawlReportService`."""
    service = CrawlReportService(fetcher_factory)
    if observer is not None:
        service.add_observer(observer)
    return await service.run(settings)

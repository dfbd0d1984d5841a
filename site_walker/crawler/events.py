# site_walker/crawler/events.py
"""
Event sink interfaces.

The engine only talks to an :class:`EventHandler`; the report service adds
start/error notifications for its own observers.
"""
from __future__ import annotations

from typing import List, Protocol, runtime_checkable

__all__ = ("EventHandler", "CrawlServiceObserver")


@runtime_checkable
class EventHandler(Protocol):
    """Receives crawl engine notifications. Called from worker tasks."""

    def on_progress(self, processed_count: int) -> None:
        ...

    def on_complete(self, processed_count: int, canceled: bool) -> None:
        ...


@runtime_checkable
class CrawlServiceObserver(Protocol):
    """Receives notifications from :class:`~site_walker.engine.CrawlReportService`."""

    def on_start(self, starting_url: str) -> None:
        ...

    def on_error(self, messages: List[str]) -> None:
        ...

    def on_progress(self, processed_count: int) -> None:
        ...

    def on_complete(self, processed_count: int, canceled: bool, report_path: str) -> None:
        ...

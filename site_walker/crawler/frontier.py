# site_walker/crawler/frontier.py
"""
Registry of every URL discovered during one crawl run.

The frontier is both the deduplication mechanism and the termination oracle:
records are only ever added, each one is completed at most once, so
:meth:`Frontier.size` never decreases.
"""
from __future__ import annotations

import threading
from typing import Dict, Iterator, List, Optional

from site_walker.crawler.models import PENDING, PageOutcome, PageRecord, Pending

__all__ = ("Frontier",)


class Frontier:
    """Append-only, thread-safe map of canonical URL to :class:`PageRecord`."""

    def __init__(self) -> None:
        self._records: Dict[str, PageRecord] = {}
        self._lock = threading.Lock()

    def try_register(self, url: str) -> bool:
        """Inserts a pending record for *url* if absent.

        Returns True only for the caller that performed the insertion; that
        caller owns the URL and is the only one allowed to complete it.
        """
        with self._lock:
            if url in self._records:
                return False
            self._records[url] = PageRecord(url, PENDING)
            return True

    def complete(self, url: str, outcome: PageOutcome) -> None:
        """Moves the record of *url* from pending to its final *outcome*."""
        if isinstance(outcome, Pending):
            raise ValueError(f"Cannot complete {url} with a pending outcome.")
        with self._lock:
            record = self._records.get(url)
            if record is None:
                raise KeyError(url)
            if not record.is_pending:
                raise ValueError(f"URL already processed: {url}")
            record.outcome = outcome

    def get(self, url: str) -> Optional[PageRecord]:
        with self._lock:
            return self._records.get(url)

    def size(self) -> int:
        """Number of registered records, pending or complete."""
        with self._lock:
            return len(self._records)

    def snapshot(self) -> List[PageRecord]:
        """Copies of all records ordered by URL."""
        with self._lock:
            records = [PageRecord(r.url, r.outcome) for r in self._records.values()]
        records.sort(key=lambda r: r.url)
        return records

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._records

    def __iter__(self) -> Iterator[str]:
        return iter([r.url for r in self.snapshot()])

# File: site_walker/utils.py
"""site_walker.utils: URL canonicalisation and origin scoping shared by the crawler and reports."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence
from urllib.parse import urlsplit, urlunsplit

from site_walker.crawler.errors import MalformedURLError
from site_walker.logger import logger

__all__: Sequence[str] = (
    "SUPPORTED_SCHEMES",
    "canonical_url",
    "origin_of",
    "is_in_origin",
    "remove_duplicates",
)

SUPPORTED_SCHEMES = ("http", "https")


def canonical_url(url: Optional[str]) -> str:
    """Trims whitespace, lower-cases scheme and host, strips a single trailing slash.

    This is the identity used by the frontier and the reports, so
    ``HTTP://Site.test/a/`` and ``http://site.test/a`` name the same page.
    Path, query and fragment keep their case: servers may treat
    ``/Docs`` and ``/docs`` as different resources.
    """
    if url is None:
        return ""
    canonical = url.strip()
    try:
        parts = urlsplit(canonical)
    except ValueError:
        # Unparseable (e.g. broken IPv6 host); origin_of reports it.
        parts = None
    if parts is not None and parts.netloc:
        canonical = urlunsplit(
            (parts.scheme.lower(), parts.netloc.lower(), parts.path, parts.query, parts.fragment)
        )
    if canonical.endswith("/"):
        canonical = canonical[:-1]
    return canonical


def origin_of(url: Optional[str]) -> str:
    """Returns ``scheme://host[:port]`` of *url* or raises :class:`MalformedURLError`."""
    canonical = canonical_url(url)
    try:
        parts = urlsplit(canonical)
        port = parts.port
    except ValueError as exc:
        raise MalformedURLError(url, str(exc)) from exc

    if parts.scheme not in SUPPORTED_SCHEMES:
        raise MalformedURLError(url, "unsupported or missing scheme")
    if not parts.hostname:
        raise MalformedURLError(url, "missing host")

    host = parts.netloc.rpartition("@")[2]
    if port is None and host.endswith(":"):
        host = host[:-1]
    origin = f"{parts.scheme}://{host}"
    logger.debug("Origin of %s -> %s", url, origin)
    return origin


def is_in_origin(url: Optional[str], origin: str) -> bool:
    """Case-insensitive prefix test of the canonical *url* against *origin*."""
    return bool(origin) and canonical_url(url).lower().startswith(origin.lower())


def remove_duplicates(urls: Iterable[str]) -> List[str]:
    """Removes duplicate URLs while keeping the first-seen order."""
    return list(dict.fromkeys(urls))

# === FILE: site_walker/parser/html_parser.py ===
"""HTML extraction for SiteWalker.

:func:`parse_page` turns raw markup into a :class:`~site_walker.crawler.models.Loaded`
outcome. References are split by the element that carried them:

* imports: ``<link href="…">`` (stylesheets, icons, feeds);
* media: any element with a ``src`` attribute (``img``, ``script``, ``iframe``…);
* links: ``<a href="…">`` anchors, the only references the crawler follows.

Every URL is made absolute against ``<base href>`` when present, otherwise
against the page URL. Canonicalisation is left to the crawler.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Iterable, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_walker.crawler.models import LinkRef, Loaded

__all__: Sequence[str] = ("parse_page",)

_SKIPPED_SCHEMES = ("mailto:", "javascript:", "tel:", "data:")


def _absolute(base_url: str, value: object) -> Optional[str]:
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw or raw.lower().startswith(_SKIPPED_SCHEMES):
        return None
    absolute = urljoin(base_url, raw)
    # Fragments never identify a separate page.
    return absolute.split("#", 1)[0] or None


def _collect(tags: Iterable[object], attr: str, base_url: str) -> List[LinkRef]:
    refs: List[LinkRef] = []
    for tag in tags:
        if not isinstance(tag, Tag):
            continue
        url = _absolute(base_url, tag.get(attr))
        if url:
            refs.append(LinkRef(tag.name, url))
    return refs


def parse_page(html: str | bytes, url: str) -> Loaded:
    """Parse *html* fetched from *url* into a ``Loaded`` outcome.

    Parameters
    ----------
    html
        Page markup. Bytes are handed to BeautifulSoup for encoding detection.
    url
        Final URL of the page (after redirects), used to resolve relative references.
    """
    soup = BeautifulSoup(html, "html.parser")

    base_url = url
    base_tag = soup.find("base", href=True)
    if isinstance(base_tag, Tag):
        base_url = urljoin(url, str(base_tag["href"]).strip())

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag is not None else None

    return Loaded(
        title=title,
        imports=_collect(soup.find_all("link", href=True), "href", base_url),
        media=_collect(soup.find_all(src=True), "src", base_url),
        links=_collect(soup.find_all("a", href=True), "href", base_url),
    )

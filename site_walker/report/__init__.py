# File: site_walker/report/__init__.py
"""site_walker.report: report writers (text, JSON, HTML) used by the service and the CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from site_walker.aggregator import CrawlReport
from site_walker.report.html_report import render_html
from site_walker.report.json_report import render_json
from site_walker.report.text_report import render_text


def save_report(report: CrawlReport, path: Union[str, Path]) -> Path:
    """Saves *report*, choosing the format from the file suffix (``.json``, ``.html``, else text)."""
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix == ".json":
        return render_json(report, p)
    if suffix in (".html", ".htm"):
        return render_html(report, p)
    return render_text(report, p)


__all__ = ["save_report", "render_text", "render_json", "render_html"]

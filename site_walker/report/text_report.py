# site_walker/report/text_report.py
"""
Plain-text report. An existing non-empty file is appended to, with a
separator line between runs.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO

from site_walker.aggregator import CrawlReport, PageInfo

SEPARATOR = "-" * 80
TIME_FORMAT = "%m/%d/%Y %I:%M:%S %p"


def format_start_time(start_time: Optional[datetime]) -> str:
    """Start time in the local zone, or ``null`` if it is unknown."""
    if start_time is None:
        return "null"
    return start_time.astimezone().strftime(TIME_FORMAT)


def render_text(report: CrawlReport, output_path: Path | str) -> Path:
    """Writes *report* to *output_path* and returns the path."""
    output = Path(output_path)
    append = False
    if output.exists():
        if not output.is_file():
            raise IsADirectoryError(f"Can't write to {output.resolve()}.")
        append = output.stat().st_size > 0
    else:
        output.parent.mkdir(parents=True, exist_ok=True)

    with output.open("a", encoding="utf-8") as f:
        if append:
            f.write(f"\n\n{SEPARATOR}\n\n")
        _write_header(f, report)
        _write_pages(f, report.pages)

    return output


def _write_header(f: TextIO, report: CrawlReport) -> None:
    f.write(f"Starting URL: {report.starting_url}\n")
    f.write(f"Start Time: {format_start_time(report.start_time)}\n")
    f.write(f"Duration: {report.duration / 60:.2f} minutes")
    if report.canceled:
        f.write(" - CANCELED !!!")
    f.write("\n")


def _write_pages(f: TextIO, pages: List[PageInfo]) -> None:
    if not pages:
        f.write("\nNo pages found!!!\n")
        return

    for page in pages:
        f.write(f"\nPage: {page['url']}\n")
        if page.get("load_error"):
            f.write(f" - Load Error: {page['load_error']}\n")
            continue
        f.write(f" - Title: {page.get('title')}\n")
        _write_links(f, "Internal Links", page.get("internal_links", []))
        _write_links(f, "External Links", page.get("external_links", []))
        _write_links(f, "Content Links", page.get("content_links", []))


def _write_links(f: TextIO, label: str, links: List[str]) -> None:
    if not links:
        f.write(f" - {label}: NONE\n")
        return
    f.write(f" - {label}:\n")
    for link in links:
        f.write(f"     {link}\n")

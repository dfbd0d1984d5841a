# File: tests/test_report.py
import json
import time
from datetime import datetime, timedelta, timezone

import pytest

from site_walker.aggregator import CrawlReport, aggregate_result
from site_walker.crawler.models import CrawlPage, CrawlResult
from site_walker.report import render_html, render_json, render_text, save_report
from site_walker.report.text_report import SEPARATOR, format_start_time

START = datetime(2024, 3, 5, 14, 7, 9, tzinfo=timezone.utc)


@pytest.fixture()
def eastern_zone(monkeypatch):
    """Fixed UTC-5 local zone without DST."""
    monkeypatch.setenv("TZ", "EST5")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture()
def report() -> CrawlReport:
    result = CrawlResult(
        seed_url="http://site.test",
        origin="http://site.test",
        start_time=START,
        duration=90.0,
        canceled=False,
        processed_count=2,
        pages=[
            CrawlPage(
                url="http://site.test",
                title="Home <&>",
                internal_links=["http://site.test/broken"],
                external_links=["http://ext.test"],
                content_links=["http://site.test/app.css"],
            ),
            CrawlPage(url="http://site.test/broken", load_error="Unable to load page."),
        ],
    )
    return aggregate_result("http://site.test/", result)


def test_aggregate_result(report: CrawlReport):
    assert report.starting_url == "http://site.test/"
    assert report.pages_processed == 2
    assert report.duration == 90.0
    assert report.pages[0]["internal_links"] == ["http://site.test/broken"]
    assert report.pages[1]["load_error"] == "Unable to load page."


def test_render_text(tmp_path, report: CrawlReport, eastern_zone):
    out = render_text(report, tmp_path / "report.txt")
    text = out.read_text(encoding="utf-8")

    assert text == (
        "Starting URL: http://site.test/\n"
        "Start Time: 03/05/2024 09:07:09 AM\n"
        "Duration: 1.50 minutes\n"
        "\n"
        "Page: http://site.test\n"
        " - Title: Home <&>\n"
        " - Internal Links:\n"
        "     http://site.test/broken\n"
        " - External Links:\n"
        "     http://ext.test\n"
        " - Content Links:\n"
        "     http://site.test/app.css\n"
        "\n"
        "Page: http://site.test/broken\n"
        " - Load Error: Unable to load page.\n"
    )


def test_render_text_appends_with_separator(tmp_path, report: CrawlReport):
    path = tmp_path / "nested" / "report.txt"
    render_text(report, path)
    report.canceled = True
    report.pages = []
    render_text(report, path)

    first, second = path.read_text(encoding="utf-8").split(f"\n\n{SEPARATOR}\n\n")
    assert first.startswith("Starting URL: http://site.test/")
    assert "Duration: 1.50 minutes - CANCELED !!!\n" in second
    assert second.endswith("\nNo pages found!!!\n")


def test_render_text_empty_links(tmp_path):
    report = CrawlReport(
        starting_url="http://site.test",
        pages=[{"url": "http://site.test", "title": None, "load_error": None,
                "internal_links": [], "external_links": [], "content_links": []}],
    )
    text = render_text(report, tmp_path / "r.txt").read_text(encoding="utf-8")
    assert "Start Time: null\n" in text
    assert " - Title: None\n" in text
    assert " - Internal Links: NONE\n - External Links: NONE\n - Content Links: NONE\n" in text


def test_render_text_refuses_directory(tmp_path, report: CrawlReport):
    with pytest.raises(IsADirectoryError):
        render_text(report, tmp_path)


def test_render_json(tmp_path, report: CrawlReport):
    out = render_json(report, tmp_path / "out" / "report.json")
    data = json.loads(out.read_text(encoding="utf-8"))

    assert data["starting_url"] == "http://site.test/"
    assert data["start_time"] == START.isoformat()
    assert data["pages_processed"] == 2
    assert data["canceled"] is False
    assert [p["url"] for p in data["pages"]] == ["http://site.test", "http://site.test/broken"]


def test_render_html_escapes(tmp_path, report: CrawlReport, eastern_zone):
    out = render_html(report, tmp_path / "report.html")
    content = out.read_text(encoding="utf-8")

    assert "<html" in content
    assert "Home &lt;&amp;&gt;" in content
    assert "Home <&>" not in content
    assert "http://ext.test" in content
    assert "Load Error: Unable to load page." in content
    assert "1.50 minutes" in content
    assert "Start time: 03/05/2024 09:07:09 AM" in content


@pytest.mark.parametrize(
    "name,check",
    [
        ("r.json", lambda text: json.loads(text)["pages_processed"] == 2),
        ("r.HTML", lambda text: text.lstrip().startswith("<!DOCTYPE html>")),
        ("r.htm", lambda text: "<html" in text),
        ("r.txt", lambda text: text.startswith("Starting URL:")),
        ("r.log", lambda text: text.startswith("Starting URL:")),
    ],
)
def test_save_report_picks_format_by_suffix(tmp_path, report: CrawlReport, name, check):
    path = save_report(report, tmp_path / name)
    assert path == tmp_path / name
    assert check(path.read_text(encoding="utf-8"))


def test_start_time_is_shown_in_local_zone(eastern_zone):
    assert format_start_time(START) == "03/05/2024 09:07:09 AM"
    plus_two = START.astimezone(timezone(timedelta(hours=2)))
    assert format_start_time(plus_two) == "03/05/2024 09:07:09 AM"
    assert format_start_time(None) == "null"

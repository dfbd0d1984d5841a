# File: site_walker/report/html_report.py
"""site_walker.report.html_report: HTML report rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from site_walker.aggregator import CrawlReport
from site_walker.report.text_report import format_start_time

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


def render_html(
    report: CrawlReport,
    output_path: Union[Path, str],
    template_dir: Union[Path, str] = DEFAULT_TEMPLATE_DIR,
) -> Path:
    """Renders *report* through ``report.html.j2`` and saves it.

    Args:
        report: the CrawlReport.
        output_path: path of the resulting HTML file.
        template_dir: directory with Jinja2 templates; defaults to the bundled one.

    Returns:
        Path of the saved HTML file.
    """
    template_dir = Path(template_dir)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template("report.html.j2")

    context: dict[str, Any] = {
        "report": report,
        "start_time": format_start_time(report.start_time),
        "pages": report.pages,
        "duration_minutes": report.duration / 60,
    }

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path

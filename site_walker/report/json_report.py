# site_walker/report/json_report.py

"""
JSON report for SiteWalker.

Serialises a CrawlReport to a file.
"""
from pathlib import Path

from site_walker.aggregator import CrawlReport


def render_json(report: CrawlReport, output_path: Path | str) -> Path:
    """
    Saves *report* as JSON at *output_path* and returns the path.

    Example:
    ```python
    from site_walker.report.json_report import render_json
    report_path = render_json(report, 'reports/report.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        f.write(report.json(pretty=True))

    return output

# cli.py

"""
Launcher for running SiteWalker from a source checkout.

Example:
    python cli.py --config configs/crawler.yaml crawl --result-file report.txt
"""
from site_walker.cli import cli


if __name__ == '__main__':
    cli()

# === FILE: site_walker/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point for SiteWalker.

Commands:
  crawl     Crawl the configured site and save the report
  config    Show the validated configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/crawler.yaml)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only if omitted)
  --log-format FORMAT Logging format string

crawl options (override the config file):
  --url URL             Starting URL
  --workers INT         Number of concurrent workers
  --output DIR          Output directory
  --result-file NAME    Report file name (.txt, .json or .html)
  --crawl-timeout SEC   Timeout for the whole crawl

Example:
  site-walker --config configs/crawler.yaml crawl --workers 8 --result-file report.json
"""
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List

import click
from pydantic import ValidationError

from site_walker import __version__
from site_walker.config import CrawlConfig, describe_errors, read_config
from site_walker.engine import run_crawl
from site_walker.logger import DEFAULT_FORMAT, configure

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


class ConsoleObserver:
    """Prints crawl service events to the terminal."""

    def __init__(self) -> None:
        self.failed = False

    def on_start(self, starting_url: str) -> None:
        click.echo(f'Crawling URL: {starting_url}')

    def on_error(self, messages: List[str]) -> None:
        self.failed = True
        click.echo('Unable to run crawler:')
        for message in messages:
            click.echo(f' - {message}')
        click.echo('\nPlease update the configuration file and try again.')

    def on_progress(self, processed_count: int) -> None:
        click.echo('.', nl=False)

    def on_complete(self, processed_count: int, canceled: bool, report_path: str) -> None:
        click.echo()
        click.echo(f'Pages Processed: {processed_count} ==> {"CANCELED" if canceled else "COMPLETE"}')
        click.echo(f'Result stored in {report_path}')


def _load_settings(config_path: Path) -> Dict[str, Any]:
    if config_path.is_file():
        return read_config(config_path)
    return {}


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteWalker, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default='configs/crawler.yaml',
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Path to the YAML/JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file path (stdout if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SiteWalker command group."""
    configure(level=log_level, log_file=log_file, log_format=log_format)
    try:
        settings = _load_settings(config_path)
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Error loading configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['settings'] = settings


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option('--url', '-u', 'url', default=None, help='Starting URL')
@click.option('--workers', '-w', 'workers', type=int, default=None, help='Number of concurrent workers')
@click.option(
    '--output', '-o', 'output',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Output directory for the report'
)
@click.option('--result-file', '-r', 'result_file', default=None, help='Report file name (.txt, .json, .html)')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None, help='Timeout for the whole crawl (seconds)')
@click.pass_context
def crawl(ctx, url, workers, output, result_file, crawl_timeout):
    """Crawl the site and write the report."""
    settings = dict(ctx.obj['settings'])
    overrides = {
        'starting_url': url,
        'num_workers': workers,
        'output_path': output,
        'result_file': result_file,
        'crawl_timeout': crawl_timeout,
    }
    settings.update({k: v for k, v in overrides.items() if v is not None})

    observer = ConsoleObserver()
    try:
        report_path = asyncio.run(run_crawl(settings, observer))
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    if report_path is None or observer.failed:
        sys.exit(1)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the validated configuration as JSON."""
    try:
        cfg = CrawlConfig(**ctx.obj['settings'])
    except ValidationError as e:
        print_error('Invalid configuration:\n' + '\n'.join(f' - {m}' for m in describe_errors(e)))
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()

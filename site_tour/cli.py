# === FILE: site_tour/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point of the SiteTour crawler.

Commands:
  crawl     Crawl a site over HTTP and print/save the report
  demo      Crawl the built-in sample site (no network)
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (console only when omitted)
  --log-format FORMAT Logging format (e.g. "%(asctime)s %(levelname)s %(message)s")

crawl options:
  SEED                Seed URL (overrides seed_url from the config)
  --depth INT         Depth budget (overrides max_depth)
  --json PATH         Save the JSON report to a file
  --html PATH         Save the HTML report to a file
  --template DIR      Directory with Jinja2 templates
  --pretty            Indent JSON output (2 spaces)
  --crawl-timeout SEC Timeout of the whole crawl (seconds)

Also:
  --version, -v       Show the SiteTour version

Example:
  site-tour crawl https://example.com --depth 2 --json report.json
"""
import asyncio
import sys
from pathlib import Path

import click

from site_tour import __version__
from site_tour.aggregator import aggregate_results
from site_tour.config import _DEFAULT_CFG, CrawlConfig, load_config, with_overrides
from site_tour.crawler.crawler import crawl
from site_tour.crawler.fetcher import SAMPLE_SITE, MappingFetcher
from site_tour.crawler.models import FetchError
from site_tour.engine import start_crawl
from site_tour.logger import init_logging, logger
from site_tour.report.html_report import render_html
from site_tour.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
SAMPLE_SEED = "https://golang.org/"


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


class EchoReporter:
    """Prints each outcome to the console as soon as it is known."""

    def found(self, resource_id: str, content: str) -> None:
        click.echo(f'found: {resource_id} "{content}"')

    def failed(self, resource_id: str, error: FetchError) -> None:
        click.echo(str(error))


def _resolve_config(config_path, seed=None) -> CrawlConfig:
    if config_path is not None or _DEFAULT_CFG.exists():
        return load_config(config_path)
    if seed is None:
        raise click.UsageError('Give a SEED or a config file with seed_url')
    return CrawlConfig(seed_url=seed)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteTour, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML/JSON config file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (console only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SiteTour CLI command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('seed', required=False)
@click.option('--depth', '-d', 'depth', type=click.IntRange(min=0), default=None,
              help='Depth budget (overrides max_depth)')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the HTML report to a file'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory with Jinja2 templates (bundled one by default)'
)
@click.option('--pretty', is_flag=True, help='Indent JSON output (2 spaces)')
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Timeout of the whole crawl (seconds)'
)
@click.pass_context
def crawl_command(ctx, seed, depth, json_output, html_output, template_dir, pretty, crawl_timeout):
    """Crawl SEED over HTTP and produce reports."""
    try:
        cfg = _resolve_config(ctx.obj['config_path'], seed)
        cfg = with_overrides(cfg, seed_url=seed, max_depth=depth, crawl_timeout=crawl_timeout)
    except click.UsageError:
        raise
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')

    logger.info('Crawling %s (depth %d)', cfg.seed_url, cfg.max_depth)
    try:
        if cfg.crawl_timeout:
            report = asyncio.run(asyncio.wait_for(start_crawl(cfg), timeout=cfg.crawl_timeout))
        else:
            report = asyncio.run(start_crawl(cfg))
    except asyncio.TimeoutError:
        print_error(f'Crawl did not finish within {cfg.crawl_timeout} seconds')
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    # Nothing saved to a file: print to stdout
    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Failed to save JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Failed to save HTML: {e}')


@cli.command('demo', context_settings=CONTEXT_SETTINGS)
@click.option('--depth', '-d', 'depth', type=click.IntRange(min=0), default=4, show_default=True,
              help='Depth budget')
def demo(depth):
    """Crawl the built-in sample site without touching the network."""
    result = asyncio.run(crawl(SAMPLE_SEED, depth, MappingFetcher(SAMPLE_SITE), reporter=EchoReporter()))
    report = aggregate_results(result)
    click.echo(f'{len(report.pages)} found, {len(report.errors)} failed')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.argument('seed', required=False)
@click.pass_context
def show_config(ctx, seed):
    """Show the effective configuration as JSON."""
    try:
        cfg = with_overrides(_resolve_config(ctx.obj['config_path'], seed), seed_url=seed)
    except click.UsageError:
        raise
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()

# File: site_tour/engine.py
"""site_tour.engine: orchestration layer that runs a crawl and aggregates the results."""

from __future__ import annotations

import asyncio
from typing import Optional

from site_tour.aggregator import CrawlReport, aggregate_results
from site_tour.config import CrawlConfig, load_config
from site_tour.crawler.crawler import crawl
from site_tour.crawler.fetcher import Fetcher, HttpFetcher
from site_tour.crawler.link_extractor import normalize_url
from site_tour.crawler.reporter import Reporter
from site_tour.logger import logger

__all__ = ["Engine", "start_crawl"]


async def start_crawl(
    config: CrawlConfig,
    fetcher: Optional[Fetcher] = None,
    reporter: Optional[Reporter] = None,
) -> CrawlReport:
    """Crawl ``config.seed_url`` with *fetcher* (HTTP when omitted) and build a report.

    An injected fetcher gets the seed verbatim; only the HTTP path normalizes it.
    """
    if fetcher is not None:
        result = await crawl(config.seed_url, config.max_depth, fetcher, reporter=reporter)
    else:
        seed = normalize_url(config.seed_url)
        async with HttpFetcher(config) as http:
            result = await crawl(seed, config.max_depth, http, reporter=reporter)
    return aggregate_results(result)


class Engine:
    """Facade for the CLI and tests: load config, run the crawl, return the report."""

    @staticmethod
    def load_config(path: Optional[str]) -> CrawlConfig:
        return load_config(path)

    def __init__(
        self,
        config: CrawlConfig,
        fetcher: Optional[Fetcher] = None,
        reporter: Optional[Reporter] = None,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.reporter = reporter

    def start_crawl(self) -> CrawlReport:
        """Run the crawl synchronously, bounded by ``crawl_timeout`` when it is set."""
        logger.info("Starting crawl…")
        runner = start_crawl(self.config, self.fetcher, self.reporter)
        try:
            if self.config.crawl_timeout:
                return asyncio.run(asyncio.wait_for(runner, timeout=self.config.crawl_timeout))
            return asyncio.run(runner)
        except asyncio.TimeoutError:
            logger.error("Crawl did not finish within %s seconds", self.config.crawl_timeout)
            raise
        except Exception as exc:
            logger.error("Crawl failed: %s", exc)
            raise

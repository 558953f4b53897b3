from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from site_tour.crawler.fetcher import Fetcher
from site_tour.crawler.models import CrawlStats, FetchError, FetchFailure, FetchOutcome, FetchSuccess
from site_tour.crawler.reporter import LoggingReporter, Reporter
from site_tour.crawler.visited import VisitedSet
from site_tour.logger import logger

__all__ = ("CrawlResult", "Crawler", "crawl")


@dataclass(slots=True)
class CrawlResult:
    """Everything one crawl session produced."""
    seed: str
    max_depth: int
    outcomes: Dict[str, FetchOutcome] = field(default_factory=dict)
    stats: CrawlStats = field(default_factory=CrawlStats)

    @property
    def pages(self) -> List[Tuple[str, FetchSuccess]]:
        return [(rid, o) for rid, o in self.outcomes.items() if isinstance(o, FetchSuccess)]

    @property
    def errors(self) -> List[Tuple[str, FetchFailure]]:
        return [(rid, o) for rid, o in self.outcomes.items() if isinstance(o, FetchFailure)]


class Crawler:
    """
    Recursive concurrent traversal over one session.

    Every node runs as its own task; a node's children live in a TaskGroup,
    so leaving ``visit`` means the whole subtree below it has finished.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        reporter: Optional[Reporter] = None,
        visited: Optional[VisitedSet] = None,
    ) -> None:
        self.fetcher = fetcher
        self.reporter: Reporter = reporter if reporter is not None else LoggingReporter()
        self.visited = visited if visited is not None else VisitedSet()
        self.stats = CrawlStats()

    async def run(self, seed: str, max_depth: int) -> CrawlResult:
        logger.info("Start crawl: %s (depth %d)", seed, max_depth)
        start = time.monotonic()
        await self.visit(seed, max_depth)
        duration = time.monotonic() - start
        logger.info(
            "Finished: %d fetched, %d failed, %d duplicates in %.2f s",
            self.stats.fetched, self.stats.failed, self.stats.duplicates, duration,
        )
        return CrawlResult(seed, max_depth, self.visited.snapshot(), self.stats)

    async def visit(self, resource_id: str, depth: int) -> None:
        if depth <= 0:
            self.stats.depth_exhausted += 1
            return
        if not await self.visited.claim(resource_id):
            self.stats.duplicates += 1
            logger.debug("Skip duplicate %s", resource_id)
            return

        try:
            outcome = await self.fetcher.fetch(resource_id)
        except FetchError as exc:
            await self.visited.record(resource_id, FetchFailure(exc))
            self.stats.failed += 1
            self.reporter.failed(resource_id, exc)
            return

        await self.visited.record(resource_id, outcome)
        self.stats.fetched += 1
        self.reporter.found(resource_id, outcome.content)

        if not outcome.links or depth == 1:
            # children would all stop at depth 0
            self.stats.depth_exhausted += len(outcome.links)
            return
        async with asyncio.TaskGroup() as tg:
            for link in outcome.links:
                tg.create_task(self.visit(link, depth - 1))


async def crawl(
    seed: str,
    max_depth: int,
    fetcher: Fetcher,
    *,
    reporter: Optional[Reporter] = None,
    visited: Optional[VisitedSet] = None,
) -> CrawlResult:
    """Crawl from *seed* and return once the bounded, deduplicated traversal is done."""
    return await Crawler(fetcher, reporter, visited).run(seed, max_depth)

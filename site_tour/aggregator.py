"""site_tour.aggregator: turns a finished crawl into a serializable report."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, TypedDict

from site_tour.crawler.crawler import CrawlResult


class PageInfo(TypedDict):
    """A successfully fetched resource."""

    url: str
    content: str
    links: List[str]


class ErrorInfo(TypedDict):
    """A resource whose fetch failed."""

    url: str
    error: str
    status: Optional[int]


@dataclass(slots=True)
class CrawlReport:
    """Crawl outcome: fetched pages, failures and session counters."""

    seed: str
    max_depth: int
    pages: List[PageInfo] = field(default_factory=list)
    errors: List[ErrorInfo] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(asdict(self), ensure_ascii=False, indent=2 if pretty else None)


def aggregate_results(result: CrawlResult) -> CrawlReport:
    """Collect the parts of a CrawlResult into a CrawlReport, keeping visit order."""
    report = CrawlReport(seed=result.seed, max_depth=result.max_depth, stats=result.stats.as_dict())
    for url, page in result.pages:
        report.pages.append({"url": url, "content": page.content, "links": list(page.links)})
    for url, failure in result.errors:
        report.errors.append({"url": url, "error": failure.message, "status": failure.error.status})
    return report

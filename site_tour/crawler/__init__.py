"""site_tour.crawler: concurrent traversal engine and its collaborators."""
from site_tour.crawler.crawler import CrawlResult, Crawler, crawl
from site_tour.crawler.fetcher import Fetcher, HttpFetcher, MappingFetcher, SAMPLE_SITE
from site_tour.crawler.models import CrawlStats, FetchError, FetchFailure, FetchOutcome, FetchSuccess
from site_tour.crawler.reporter import LoggingReporter, NullReporter, Reporter
from site_tour.crawler.visited import VisitedSet

__all__ = [
    "CrawlResult",
    "CrawlStats",
    "Crawler",
    "Fetcher",
    "FetchError",
    "FetchFailure",
    "FetchOutcome",
    "FetchSuccess",
    "HttpFetcher",
    "LoggingReporter",
    "MappingFetcher",
    "NullReporter",
    "Reporter",
    "SAMPLE_SITE",
    "VisitedSet",
    "crawl",
]

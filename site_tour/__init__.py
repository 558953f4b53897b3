"""
SiteTour package initializer.
Defines package version and exposes the crawl entry points.
"""
__version__ = "0.1.0"

from site_tour.crawler import Crawler, MappingFetcher, VisitedSet, crawl  # noqa: E402

__all__ = ["__version__", "Crawler", "MappingFetcher", "VisitedSet", "crawl"]

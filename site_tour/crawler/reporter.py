"""
Reporting sinks: where each node's outcome goes as soon as it is known.
"""
from __future__ import annotations

from typing import Protocol

from site_tour.crawler.models import FetchError
from site_tour.logger import logger

__all__ = ("Reporter", "LoggingReporter", "NullReporter")


class Reporter(Protocol):
    def found(self, resource_id: str, content: str) -> None: ...

    def failed(self, resource_id: str, error: FetchError) -> None: ...


class LoggingReporter:
    """Default sink: found pages at INFO, failures at WARNING."""

    def found(self, resource_id: str, content: str) -> None:
        logger.info('found: %s "%s"', resource_id, content)

    def failed(self, resource_id: str, error: FetchError) -> None:
        logger.warning("Failed %s: %s", resource_id, error)


class NullReporter:
    def found(self, resource_id: str, content: str) -> None:
        pass

    def failed(self, resource_id: str, error: FetchError) -> None:
        pass

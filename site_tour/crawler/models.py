"""
Data models for the SiteTour crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


class FetchError(Exception):
    """Resource could not be retrieved (not found, network failure, bad status)."""

    def __init__(self, resource_id: str, reason: str, status: Optional[int] = None) -> None:
        super().__init__(reason)
        self.resource_id = resource_id
        self.reason = reason
        self.status = status

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True, slots=True)
class FetchSuccess:
    """Content summary of a fetched resource and the ids it links to, in order."""

    content: str
    links: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FetchFailure:
    error: FetchError

    @property
    def message(self) -> str:
        return str(self.error)


FetchOutcome = Union[FetchSuccess, FetchFailure]


@dataclass(slots=True)
class CrawlStats:
    """Per-session counters."""

    fetched: int = 0
    failed: int = 0
    duplicates: int = 0
    depth_exhausted: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "fetched": self.fetched,
            "failed": self.failed,
            "duplicates": self.duplicates,
            "depth_exhausted": self.depth_exhausted,
        }

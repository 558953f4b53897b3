"""
Session-scoped record of claimed and fetched resources.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Iterator, Optional, Set

from site_tour.crawler.models import FetchOutcome

__all__ = ("VisitedSet",)


class VisitedSet:
    """
    Mapping ResourceID -> FetchOutcome shared by every branch of one crawl.

    ``claim`` is the test-and-mark step: it answers True exactly once per id.
    The outcome is stored later by ``record``; the lock is never held while
    the fetch itself runs.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._claimed: Set[str] = set()
        self._outcomes: Dict[str, FetchOutcome] = {}

    async def claim(self, resource_id: str) -> bool:
        async with self._lock:
            if resource_id in self._claimed:
                return False
            self._claimed.add(resource_id)
            return True

    async def record(self, resource_id: str, outcome: FetchOutcome) -> None:
        async with self._lock:
            if resource_id not in self._claimed:
                raise KeyError(resource_id)
            if resource_id in self._outcomes:
                raise ValueError(f"outcome for {resource_id!r} already recorded")
            self._outcomes[resource_id] = outcome

    def get(self, resource_id: str) -> Optional[FetchOutcome]:
        return self._outcomes.get(resource_id)

    @property
    def claimed(self) -> frozenset[str]:
        return frozenset(self._claimed)

    def snapshot(self) -> Dict[str, FetchOutcome]:
        """Copy of recorded outcomes in the order they were recorded."""
        return dict(self._outcomes)

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self._outcomes

    def __len__(self) -> int:
        return len(self._outcomes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._outcomes)

# site_tour/crawler/fetcher.py
"""
Fetchers: resolve a resource id to its content summary and outgoing links.

The crawl engine only relies on the :class:`Fetcher` protocol. Two
implementations ship here: :class:`HttpFetcher` for real sites and
:class:`MappingFetcher`, a deterministic double backed by a dict.
"""
from __future__ import annotations

import asyncio
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from aiohttp import ClientError, ClientResponse, ClientSession, ClientTimeout

from site_tour.config import CrawlConfig
from site_tour.crawler.link_extractor import extract_links, summarize
from site_tour.crawler.models import FetchError, FetchSuccess
from site_tour.logger import logger

__all__ = ("Fetcher", "HttpFetcher", "MappingFetcher", "SAMPLE_SITE")


class Fetcher(Protocol):
    async def fetch(self, resource_id: str) -> FetchSuccess:
        """Return content and links of *resource_id* or raise FetchError."""
        ...


class MappingFetcher:
    """Fetcher that returns canned results from a ``{id: (content, links)}`` mapping."""

    def __init__(
        self,
        pages: Mapping[str, Tuple[str, Sequence[str]]],
        delay: float = 0.0,
    ) -> None:
        self.pages = pages
        self.delay = delay
        self.calls: List[str] = []

    async def fetch(self, resource_id: str) -> FetchSuccess:
        self.calls.append(resource_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        try:
            content, links = self.pages[resource_id]
        except KeyError:
            raise FetchError(resource_id, f"not found: {resource_id}") from None
        return FetchSuccess(content, tuple(links))


SAMPLE_SITE: Dict[str, Tuple[str, List[str]]] = {
    "https://golang.org/": (
        "The Go Programming Language",
        ["https://golang.org/pkg/", "https://golang.org/cmd/"],
    ),
    "https://golang.org/pkg/": (
        "Packages",
        [
            "https://golang.org/",
            "https://golang.org/cmd/",
            "https://golang.org/pkg/fmt/",
            "https://golang.org/pkg/os/",
        ],
    ),
    "https://golang.org/pkg/fmt/": (
        "Package fmt",
        ["https://golang.org/", "https://golang.org/pkg/"],
    ),
    "https://golang.org/pkg/os/": (
        "Package os",
        ["https://golang.org/", "https://golang.org/pkg/"],
    ),
}


class HttpFetcher:
    """Fetches pages over HTTP with retries/backoff and a per-request timeout."""

    _RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

    def __init__(self, config: CrawlConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> HttpFetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, resource_id: str) -> FetchSuccess:
        if not self.session:
            raise RuntimeError("Session not initialized")
        attempts = 0
        while True:
            last_status: Optional[int] = None
            try:
                async with self.session.get(resource_id) as resp:
                    status = resp.status
                    if status == 404:
                        raise FetchError(resource_id, f"not found: {resource_id}", status)
                    if status in self._RETRY_STATUS:
                        last_status = status
                        raise ClientError(f"retryable status {status}")
                    if status != 200:
                        raise FetchError(resource_id, f"HTTP {status}: {resource_id}", status)
                    mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                    if mime in ("text/html", "application/xhtml+xml"):
                        html = await self._decode(resp)
                        return self._parse(str(resp.url), html)
                    data = await resp.read()
                    return FetchSuccess(f"{mime or 'unknown'}, {len(data)} bytes")
            except asyncio.TimeoutError:
                raise FetchError(resource_id, f"timeout: {resource_id}") from None
            except ClientError as exc:
                attempts += 1
                if attempts > self.config.retry_times:
                    raise FetchError(resource_id, f"{exc}: {resource_id}", last_status) from exc
                backoff = min(60.0, self.config.retry_backoff * 2**attempts)
                logger.debug(
                    "Retry %d/%d for %s after %.2f s", attempts, self.config.retry_times, resource_id, backoff
                )
                await asyncio.sleep(backoff)

    @staticmethod
    async def _decode(resp: ClientResponse) -> str:
        """Body as text; undecodable bytes are replaced, an unknown charset falls back to UTF-8."""
        try:
            return await resp.text(errors="replace")
        except LookupError:
            return (await resp.read()).decode("utf-8", errors="replace")

    def _parse(self, url: str, html: str) -> FetchSuccess:
        links = extract_links(url, html, same_host=self.config.same_host_only)
        return FetchSuccess(summarize(html, self.config.summary_length), tuple(links))

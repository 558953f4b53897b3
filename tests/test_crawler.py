# Test-suite for the SiteTour traversal engine
from __future__ import annotations

import asyncio
import time

import pytest

from site_tour.crawler.crawler import Crawler, crawl
from site_tour.crawler.fetcher import SAMPLE_SITE, MappingFetcher
from site_tour.crawler.models import FetchFailure, FetchSuccess
from site_tour.crawler.reporter import LoggingReporter, NullReporter
from site_tour.crawler.visited import VisitedSet

#: seconds every fetch sleeps in the timing tests
SLOW_SLEEP: float = 0.3


def chain(length: int) -> dict[str, tuple[str, list[str]]]:
    """n0 -> n1 -> ... -> n{length-1}"""
    return {
        f"n{i}": (f"node {i}", [f"n{i + 1}"] if i + 1 < length else [])
        for i in range(length)
    }


# --------------------------------------------------------------------------- #
#                               Scenarios                                     #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_cycle_back_to_seed(cyclic_fetcher, reporter):
    result = await crawl("A", 2, cyclic_fetcher, reporter=reporter)

    assert sorted(cyclic_fetcher.calls) == ["A", "B", "C"]
    assert set(result.outcomes) == {"A", "B", "C"}
    assert set(reporter.found_calls) == {("A", "page A"), ("B", "page B"), ("C", "page C")}
    assert reporter.failed_calls == []


@pytest.mark.asyncio()
async def test_back_link_within_budget_is_deduplicated(cyclic_fetcher):
    result = await crawl("A", 3, cyclic_fetcher, reporter=NullReporter())

    assert sorted(cyclic_fetcher.calls) == ["A", "B", "C"]
    assert result.stats.fetched == 3
    assert result.stats.duplicates == 1


@pytest.mark.asyncio()
async def test_zero_depth_fetches_nothing(cyclic_fetcher, reporter):
    result = await crawl("X", 0, cyclic_fetcher, reporter=reporter)

    assert cyclic_fetcher.calls == []
    assert result.outcomes == {}
    assert result.stats.depth_exhausted == 1
    assert reporter.found_calls == [] and reporter.failed_calls == []


@pytest.mark.asyncio()
async def test_negative_depth_is_a_no_op(cyclic_fetcher):
    result = await crawl("A", -3, cyclic_fetcher, reporter=NullReporter())
    assert cyclic_fetcher.calls == []
    assert result.outcomes == {}


@pytest.mark.asyncio()
async def test_missing_seed_reports_one_error(cyclic_fetcher, reporter):
    result = await crawl("Z", 5, cyclic_fetcher, reporter=reporter)

    assert cyclic_fetcher.calls == ["Z"]
    assert [rid for rid, _ in reporter.failed_calls] == ["Z"]
    assert str(reporter.failed_calls[0][1]) == "not found: Z"
    assert isinstance(result.outcomes["Z"], FetchFailure)
    assert result.pages == []
    assert [rid for rid, _ in result.errors] == ["Z"]


# --------------------------------------------------------------------------- #
#                               Properties                                    #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_depth_bound():
    fetcher = MappingFetcher(chain(10))
    result = await crawl("n0", 3, fetcher, reporter=NullReporter())

    assert fetcher.calls == ["n0", "n1", "n2"]
    assert list(result.outcomes) == ["n0", "n1", "n2"]


@pytest.mark.asyncio()
async def test_terminates_on_dense_cycles():
    ids = [f"p{i}" for i in range(20)]
    site = {rid: (rid, ids) for rid in ids}
    fetcher = MappingFetcher(site)

    result = await asyncio.wait_for(crawl("p0", 50, fetcher, reporter=NullReporter()), timeout=5)

    assert sorted(fetcher.calls) == sorted(ids)
    assert len(result.outcomes) == 20


@pytest.mark.asyncio()
async def test_at_most_once_with_many_paths():
    # diamond-shaped layers: every node of a layer links to every node of the next
    layers = [[f"l{d}_{i}" for i in range(4)] for d in range(4)]
    site: dict[str, tuple[str, list[str]]] = {"root": ("root", layers[0])}
    for d, layer in enumerate(layers):
        nxt = layers[d + 1] if d + 1 < len(layers) else ["root"]
        for rid in layer:
            site[rid] = (rid, nxt)
    fetcher = MappingFetcher(site, delay=0.01)

    await crawl("root", 10, fetcher, reporter=NullReporter())

    assert len(fetcher.calls) == len(set(fetcher.calls)) == len(site)


@pytest.mark.asyncio()
async def test_error_isolation(reporter):
    site = {
        "A": ("a", ["missing", "B"]),
        "B": ("b", ["C", "also-missing"]),
        "C": ("c", []),
    }
    fetcher = MappingFetcher(site)

    result = await crawl("A", 4, fetcher, reporter=reporter)

    assert {rid for rid, _ in result.pages} == {"A", "B", "C"}
    assert {rid for rid, _ in result.errors} == {"missing", "also-missing"}
    assert result.stats.failed == 2


@pytest.mark.asyncio()
async def test_siblings_fetched_concurrently():
    site = {
        "root": ("root", ["s1", "s2", "s3"]),
        "s1": ("s1", []),
        "s2": ("s2", []),
        "s3": ("s3", []),
    }
    fetcher = MappingFetcher(site, delay=SLOW_SLEEP)

    start = time.perf_counter()
    await crawl("root", 2, fetcher, reporter=NullReporter())
    elapsed = time.perf_counter() - start

    # root + one round of siblings; serial would take four sleeps
    assert elapsed < SLOW_SLEEP * 3
    assert sorted(fetcher.calls) == ["root", "s1", "s2", "s3"]


@pytest.mark.asyncio()
async def test_returns_after_whole_subtree():
    site = {
        "root": ("root", ["fast", "slow"]),
        "fast": ("fast", []),
        "slow": ("slow", ["deep"]),
        "deep": ("deep", []),
    }

    class SlowDeepFetcher(MappingFetcher):
        async def fetch(self, resource_id):
            if resource_id == "deep":
                await asyncio.sleep(SLOW_SLEEP)
            return await super().fetch(resource_id)

    result = await crawl("root", 3, SlowDeepFetcher(site), reporter=NullReporter())

    assert set(result.outcomes) == {"root", "fast", "slow", "deep"}
    assert result.outcomes["deep"] == FetchSuccess("deep", ())


@pytest.mark.asyncio()
async def test_children_spawned_in_link_order():
    site = {"root": ("root", ["c", "a", "b"]), "a": ("a", []), "b": ("b", []), "c": ("c", [])}
    fetcher = MappingFetcher(site)

    await crawl("root", 2, fetcher, reporter=NullReporter())

    assert fetcher.calls == ["root", "c", "a", "b"]


@pytest.mark.asyncio()
async def test_sessions_are_independent(cyclic_site):
    first = MappingFetcher(cyclic_site)
    second = MappingFetcher(cyclic_site)

    await crawl("A", 2, first, reporter=NullReporter())
    await crawl("A", 2, second, reporter=NullReporter())

    assert sorted(first.calls) == sorted(second.calls) == ["A", "B", "C"]


@pytest.mark.asyncio()
async def test_shared_visited_set_skips_known_ids(cyclic_fetcher):
    visited = VisitedSet()
    await visited.claim("B")

    result = await crawl("A", 3, cyclic_fetcher, reporter=NullReporter(), visited=visited)

    assert "B" not in cyclic_fetcher.calls
    assert "B" not in result.outcomes


@pytest.mark.asyncio()
async def test_unexpected_fetcher_error_propagates():
    class BrokenFetcher:
        async def fetch(self, resource_id):
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await crawl("A", 1, BrokenFetcher(), reporter=NullReporter())


@pytest.mark.asyncio()
async def test_sample_site():
    fetcher = MappingFetcher(SAMPLE_SITE)
    result = await Crawler(fetcher, NullReporter()).run("https://golang.org/", 4)

    assert {rid for rid, _ in result.pages} == set(SAMPLE_SITE)
    assert [rid for rid, _ in result.errors] == ["https://golang.org/cmd/"]
    assert len(fetcher.calls) == len(set(fetcher.calls)) == 5


@pytest.mark.asyncio()
async def test_logging_reporter_is_default(cyclic_fetcher, caplog_site):
    await crawl("Z", 1, cyclic_fetcher)
    await crawl("A", 1, MappingFetcher({"A": ("page A", [])}))

    messages = [r.getMessage() for r in caplog_site.records]
    assert "Failed Z: not found: Z" in messages
    assert 'found: A "page A"' in messages
    assert isinstance(Crawler(cyclic_fetcher).reporter, LoggingReporter)

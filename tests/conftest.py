# File: tests/conftest.py
import json
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

from site_tour.crawler.fetcher import MappingFetcher
from site_tour.crawler.models import FetchError
from site_tour.logger import logger


class RecordingReporter:
    """Collects reported outcomes instead of logging them."""

    def __init__(self) -> None:
        self.found_calls: List[Tuple[str, str]] = []
        self.failed_calls: List[Tuple[str, FetchError]] = []

    def found(self, resource_id: str, content: str) -> None:
        self.found_calls.append((resource_id, content))

    def failed(self, resource_id: str, error: FetchError) -> None:
        self.failed_calls.append((resource_id, error))


@pytest.fixture()
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture()
def cyclic_site() -> Dict[str, Tuple[str, List[str]]]:
    """A -> [B, C], B -> [A], C -> []."""
    return {
        "A": ("page A", ["B", "C"]),
        "B": ("page B", ["A"]),
        "C": ("page C", []),
    }


@pytest.fixture()
def cyclic_fetcher(cyclic_site) -> MappingFetcher:
    return MappingFetcher(cyclic_site)


@pytest.fixture()
def caplog_site(caplog):
    """The project logger does not propagate; hook caplog's handler onto it."""
    logger.addHandler(caplog.handler)
    caplog.set_level("DEBUG", logger=logger.name)
    yield caplog
    logger.removeHandler(caplog.handler)


@pytest.fixture()
def config_file(tmp_path) -> Path:
    """Return a JSON config file for a local seed."""
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "seed_url": "https://example.com/",
                "max_depth": 2,
                "timeout": 1.0,
                "user_agent": "Agent/1.0",
                "retry_times": 0,
            }
        ),
        encoding="utf-8",
    )
    return path

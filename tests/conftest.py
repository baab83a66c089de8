# File: tests/conftest.py
from pathlib import Path
from typing import Callable, List

import pytest

from linkcop.config import CrawlConfig
from linkcop.crawler.models import FetchFailure, FetchResponse
from linkcop.session import CrawlSession


class RecordingEvents:
    """FetchEvents receiver that simply remembers everything it was told."""

    def __init__(self) -> None:
        self.responses: List[FetchResponse] = []
        self.errors: List[FetchFailure] = []
        self.anchors: List[tuple] = []

    def on_response(self, response: FetchResponse) -> None:
        self.responses.append(response)

    def on_error(self, failure: FetchFailure) -> None:
        self.errors.append(failure)

    def on_anchor(self, page_url: str, href: str) -> None:
        self.anchors.append((page_url, href))


@pytest.fixture()
def cache_dir(tmp_path) -> Path:
    return tmp_path / "url-cache"


@pytest.fixture()
def make_config(cache_dir) -> Callable[..., CrawlConfig]:
    """
    Return a factory for CrawlConfig with test-friendly defaults
    (no random delay, private cache directory, no https probing).
    """

    def factory(host: str = "http://example.com", **overrides) -> CrawlConfig:
        data = dict(
            host=host,
            random_delay=0,
            timeout=5.0,
            cache_dir=cache_dir,
            probe_ssl=False,
        )
        data.update(overrides)
        return CrawlConfig(**data)

    return factory


@pytest.fixture()
def session() -> CrawlSession:
    return CrawlSession(max_visits=10)


@pytest.fixture()
def events() -> RecordingEvents:
    return RecordingEvents()

# File: tests/test_session.py
from concurrent.futures import ThreadPoolExecutor

import pytest

from linkcop.crawler.models import Method
from linkcop.session import CrawlSession


def test_edges_are_grouped_by_source_page(session):
    session.record_edge("https://site.com/", "https://site.com/a")
    session.record_edge("https://site.com/", "https://site.com/a")
    session.record_edge("https://site.com/", "https://x.com/b")
    session.record_edge("https://site.com/a", "https://site.com/")

    snap = session.snapshot()
    assert snap.pages["https://site.com/"] == {"https://site.com/a", "https://x.com/b"}
    assert snap.pages["https://site.com/a"] == {"https://site.com/"}


def test_status_ledger_last_write_wins(session):
    session.record_status("https://site.com/a", 0)
    session.record_status("https://site.com/a", 301)
    session.record_status("https://site.com/a", 200)
    assert session.status_of("https://site.com/a") == 200
    assert session.status_of("https://site.com/unknown") == 0


def test_record_response_covers_redirect_source_and_target(session):
    assert session.admit("https://site.com/old")
    session.record_response("https://site.com/old", "https://site.com/new", 200, Method.GET)

    assert session.status_of("https://site.com/old") == 200
    assert session.status_of("https://site.com/new") == 200
    # the redirect target was fetched already
    assert not session.admit("https://site.com/new")


def test_snapshot_is_detached_and_read_only(session):
    session.record_edge("https://site.com/", "https://site.com/a")
    session.record_status("https://site.com/a", 404)
    snap = session.snapshot()

    session.record_edge("https://site.com/", "https://site.com/b")
    session.record_status("https://site.com/a", 200)

    assert snap.pages["https://site.com/"] == {"https://site.com/a"}
    assert snap.status_of("https://site.com/a") == 404
    with pytest.raises(TypeError):
        snap.statuses["https://site.com/a"] = 1  # type: ignore[index]


def test_concurrent_admissions_share_the_budget():
    session = CrawlSession(max_visits=10)
    urls = [f"https://site.com/{i}" for i in range(100)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        admitted = list(pool.map(session.admit, urls))
    assert sum(admitted) == 10
    assert session.remaining_visits == 0

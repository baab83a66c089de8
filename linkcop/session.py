# File: linkcop/session.py
"""linkcop.session: Общее изменяемое состояние одного обхода под единой блокировкой."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Set

from linkcop.crawler.frontier import VisitFrontier
from linkcop.crawler.models import Method

__all__ = ["CrawlSession", "CrawlSnapshot"]


@dataclass(slots=True, frozen=True)
class CrawlSnapshot:
    """Immutable copy of the page→links map and the status ledger."""

    pages: Mapping[str, FrozenSet[str]]
    statuses: Mapping[str, int]

    def status_of(self, url: str) -> int:
        return self.statuses.get(url, 0)


class CrawlSession:
    """Owns PageLinkSet, StatusLedger and the visit frontier.

    Callers never touch the containers directly: every mutation goes through
    one of the methods below, each a single critical section on the session
    lock. The frontier shares the same lock.
    """

    def __init__(self, max_visits: int) -> None:
        self._lock = threading.RLock()
        self._frontier = VisitFrontier(max_visits, lock=self._lock)
        self._pages: Dict[str, Set[str]] = {}
        self._statuses: Dict[str, int] = {}

    @property
    def remaining_visits(self) -> int:
        return self._frontier.remaining

    def admit(self, url: str, method: Method = Method.GET) -> bool:
        return self._frontier.should_visit(url, method)

    def record_edge(self, source_page: str, link: str) -> None:
        with self._lock:
            self._pages.setdefault(source_page, set()).add(link)

    def record_status(self, url: str, status: int) -> None:
        with self._lock:
            self._statuses[url] = status

    def record_response(self, request_url: str, final_url: str, status: int, method: Method) -> None:
        """Record *status* under the final URL and, if it differs, the requested one.

        A redirect target is marked visited so it is not fetched again.
        """
        with self._lock:
            self._statuses[final_url] = status
            if final_url != request_url:
                self._statuses[request_url] = status
                self._frontier.mark_visited(final_url, method)

    def status_of(self, url: str) -> int:
        with self._lock:
            return self._statuses.get(url, 0)

    def snapshot(self) -> CrawlSnapshot:
        with self._lock:
            pages = {src: frozenset(links) for src, links in self._pages.items()}
            statuses = dict(self._statuses)
        return CrawlSnapshot(pages=MappingProxyType(pages), statuses=MappingProxyType(statuses))

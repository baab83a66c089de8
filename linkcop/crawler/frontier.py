# linkcop/crawler/frontier.py
"""
Visit frontier: dedup ledger plus the GET visit budget.
"""
from __future__ import annotations

import threading
from typing import ContextManager, Optional, Set, Tuple

from linkcop.crawler.models import Method
from linkcop.crawler.urls import is_fetchable


class VisitFrontier:
    """Decides whether a request may be dispatched.

    Every ``(method, url)`` pair is admitted at most once. GET admissions
    consume the visit budget; HEAD checks never do. The check and the
    bookkeeping happen under one lock, so two concurrent discoveries of the
    same URL cannot both be admitted and the budget cannot go negative.
    The lock may be shared with the owner of the rest of the crawl state.
    """

    def __init__(self, max_visits: int, lock: Optional[ContextManager] = None) -> None:
        if max_visits < 0:
            raise ValueError("max_visits must be >= 0")
        self._lock = lock if lock is not None else threading.RLock()
        self._remaining = max_visits
        self._seen: Set[Tuple[Method, str]] = set()

    @property
    def remaining(self) -> int:
        with self._lock:
            return self._remaining

    def should_visit(self, url: str, method: Method = Method.GET) -> bool:
        """Admit *url* for *method*; False for revisits, non-fetchable URLs and an exhausted budget."""
        if not is_fetchable(url):
            return False
        key = (method, url)
        with self._lock:
            if key in self._seen:
                return False
            if method is Method.GET:
                if self._remaining <= 0:
                    return False
                self._remaining -= 1
            self._seen.add(key)
            return True

    def mark_visited(self, url: str, method: Method = Method.GET) -> None:
        """Record a URL reached indirectly (e.g. a redirect target) without spending budget."""
        with self._lock:
            self._seen.add((method, url))

    def seen(self, url: str, method: Method = Method.GET) -> bool:
        with self._lock:
            return (method, url) in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)

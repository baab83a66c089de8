# File: linkcop/flush.py
"""linkcop.flush: Однократная финализация и вывод отчёта (обычное завершение или прерывание)."""

from __future__ import annotations

import threading
from typing import Callable, List, Optional, Sequence

from linkcop.aggregator import finalize_snapshot
from linkcop.crawler.models import ReportRow
from linkcop.logger import logger
from linkcop.session import CrawlSession

__all__ = ["ReportFlush", "Renderer"]

Renderer = Callable[[Sequence[ReportRow]], None]


class ReportFlush:
    """Finalize the session and hand the rows to the renderer, at most once.

    Natural completion and an interrupt may race to call it; only the first
    caller renders, later callers get None.
    """

    def __init__(self, session: CrawlSession, render: Optional[Renderer], *, only_failures: bool) -> None:
        self._session = session
        self._render = render
        self._only_failures = only_failures
        self._lock = threading.Lock()
        self._rows: Optional[List[ReportRow]] = None

    @property
    def fired(self) -> bool:
        return self._rows is not None

    @property
    def rows(self) -> List[ReportRow]:
        return list(self._rows or [])

    def __call__(self) -> Optional[List[ReportRow]]:
        with self._lock:
            if self._rows is not None:
                return None
            rows = finalize_snapshot(self._session.snapshot(), self._only_failures)
            self._rows = rows
        logger.info("Report: %d rows", len(rows))
        if self._render is not None:
            self._render(rows)
        return rows

# File: linkcop/aggregator.py
"""linkcop.aggregator: Сборка строк отчёта из графа ссылок и журнала статусов."""

from __future__ import annotations

from typing import AbstractSet, List, Mapping

from linkcop.crawler.models import ReportRow
from linkcop.crawler.urls import https_variant
from linkcop.session import CrawlSnapshot

__all__ = ["finalize", "finalize_snapshot"]

OK_STATUS = 200


def finalize(
    pages: Mapping[str, AbstractSet[str]],
    statuses: Mapping[str, int],
    only_failures: bool = False,
) -> List[ReportRow]:
    """Build report rows for every (source page, link) edge that is not healthy.

    Links answering 200 are skipped, and so are links still unresolved
    (status 0). For http links the https twin is reported next to them; with
    *only_failures* a twin answering 200 hides the row. Edges are walked in
    sorted order, so the result depends on the inputs only.
    """
    rows: List[ReportRow] = []
    for source_page in sorted(pages):
        for link in sorted(pages[source_page]):
            status = statuses.get(link, 0)
            if status in (OK_STATUS, 0):
                continue

            ssl_link = https_variant(link)
            ssl_status = None
            if ssl_link is not None:
                ssl_status = statuses.get(ssl_link, 0)
                if only_failures and ssl_status == OK_STATUS:
                    continue
                if ssl_status == 0:
                    ssl_status = None

            rows.append(ReportRow(source_page, link, status, ssl_link, ssl_status))
    return rows


def finalize_snapshot(snapshot: CrawlSnapshot, only_failures: bool = False) -> List[ReportRow]:
    """Агрегирует строки отчёта по неизменяемому снимку сессии."""
    return finalize(snapshot.pages, snapshot.statuses, only_failures)

# File: linkcop/report/table_report.py
"""linkcop.report.table_report: Вывод отчёта таблицей в терминал (rich)."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from linkcop.crawler.models import REPORT_HEADER, ReportRow


def build_table(rows: Sequence[ReportRow]) -> Table:
    table = Table(show_header=True, header_style="bold")
    for title in REPORT_HEADER:
        table.add_column(title, overflow="fold")
    for row in rows:
        table.add_row(*row.as_strings())
    return table


def render_table(rows: Sequence[ReportRow], console: Optional[Console] = None) -> None:
    """Печатает строки отчёта таблицей в *console* (stdout по умолчанию)."""
    (console or Console()).print(build_table(rows))

# File: linkcop/report/__init__.py
"""linkcop.report: Вывод отчёта (таблица в терминале и CSV), используемый CLI и тестами."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

from rich.console import Console

from linkcop.crawler.models import ReportRow
from linkcop.report.csv_report import render_csv
from linkcop.report.table_report import render_table


def make_renderer(
    *,
    csv_path: Optional[Union[str, Path]] = None,
    console: Optional[Console] = None,
):
    """Собирает Report Renderer: таблица в терминале и, если задан путь, CSV."""

    def render(rows: Sequence[ReportRow]) -> None:
        render_table(rows, console)
        if csv_path is not None:
            render_csv(rows, csv_path)

    return render


__all__ = ["render_csv", "render_table", "make_renderer"]

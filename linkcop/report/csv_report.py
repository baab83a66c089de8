# linkcop/report/csv_report.py

"""
Генерация CSV-отчёта linkcop.

Строки пишутся в поток (stdout по умолчанию) и в файл report.csv.
"""
import csv
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, TextIO

from linkcop.crawler.models import REPORT_HEADER, ReportRow
from linkcop.exceptions import ReportWriteError


def _write(rows: Iterable[List[str]], handle: TextIO) -> None:
    writer = csv.writer(handle)
    writer.writerow(REPORT_HEADER)
    writer.writerows(rows)


def render_csv(
    rows: Sequence[ReportRow],
    output_path: Path | str,
    stream: Optional[TextIO] = None,
) -> Path:
    """
    Сохраняет строки отчёта в CSV и дублирует их в поток.

    :param rows: строки отчёта
    :param output_path: путь к CSV-файлу (перезаписывается)
    :param stream: поток для копии отчёта, sys.stdout если не указан
    :return: Path сохранённого файла
    :raises ReportWriteError: если файл не удалось записать
    """
    table = [row.as_strings() for row in rows]
    _write(table, stream if stream is not None else sys.stdout)

    output = Path(output_path)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("w", encoding="utf-8", newline="") as f:
            _write(table, f)
    except OSError as exc:
        raise ReportWriteError(f"error writing csv {output}: {exc}") from exc

    return output

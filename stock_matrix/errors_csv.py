"""Error-log export as a quoted `file,sku,reason` CSV table."""

from __future__ import annotations

import csv
from collections.abc import Iterable
from datetime import date
from io import StringIO
from pathlib import Path

from .models import IngestError
from .normalize import compact_report_date

ERROR_REPORT_HEADER = ("file", "sku", "reason")


def format_error_report(errors: Iterable[IngestError]) -> str:
    """Return the error table as CSV text with every value double-quoted."""

    buffer = StringIO()
    buffer.write(",".join(ERROR_REPORT_HEADER) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for error in errors:
        writer.writerow([error.file, error.sku, error.reason])
    return buffer.getvalue()


def write_error_report(errors: Iterable[IngestError], *, output_path: str | Path) -> Path:
    """Write the error table, creating parent directories."""

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_error_report(errors), encoding="utf-8-sig")
    return path


def default_error_filename(report_date: date | str) -> str:
    """Return the conventional error-report file name for a report date."""

    return f"errors_{compact_report_date(report_date)}.csv"

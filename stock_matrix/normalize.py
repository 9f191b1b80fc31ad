"""Cell-level normalization helpers used by ingestion and rendering."""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any


def cell_text(value: Any) -> str:
    """Return a cell value as trimmed text, with empty cells as ``""``."""

    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        # Numeric codes typed into Excel come back as floats.
        return str(int(value))
    return str(value).strip()


def coerce_quantity(value: Any) -> tuple[int, bool]:
    """Coerce a quantity cell to a truncated integer.

    Returns the quantity and whether the value was readable. Unreadable values
    (text that is not a number, booleans, dates, uncached formulas) count as
    `0`; empty cells count as `0` and are considered readable.
    """

    if value is None:
        return 0, True

    # bool is an int subclass; a TRUE/FALSE cell is not a stock count.
    if isinstance(value, bool):
        return 0, False

    if isinstance(value, int):
        return value, True

    # Numbers are read as doubles, so out-of-range values overflow to inf.
    if isinstance(value, Decimal):
        value = float(value)

    if isinstance(value, float):
        if not math.isfinite(value):
            return 0, False
        return int(value), True

    if isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        if cleaned == "":
            return 0, True
        try:
            parsed = float(cleaned)
        except ValueError:
            return 0, False
        if not math.isfinite(parsed):
            return 0, False
        return int(parsed), True

    return 0, False


def parse_report_date(value: date | str) -> date:
    """Parse the report date from a date object or an ISO `YYYY-MM-DD` string."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    cleaned = value.strip()
    try:
        return datetime.strptime(cleaned, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Unable to parse report date: {value!r}") from None


def format_report_date(value: date | str) -> str:
    """Format the report date as zero-padded `dd/mm/yyyy`."""

    parsed = parse_report_date(value)
    return f"{parsed.day:02d}/{parsed.month:02d}/{parsed.year:04d}"


def compact_report_date(value: date | str) -> str:
    """Format the report date as `YYYYMMDD` for output file names."""

    return parse_report_date(value).strftime("%Y%m%d")

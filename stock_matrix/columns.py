"""Header-row detection and column lookup for ERP stock exports."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from openpyxl.worksheet.worksheet import Worksheet

from .models import ColumnLocation
from .normalize import cell_text

logger = logging.getLogger(__name__)

HeaderMatcher: TypeAlias = Callable[[str], bool]

HEADER_SCAN_ROWS = 10
MIN_HEADER_CELLS = 5
DEFAULT_CODE_COLUMN = 2  # B
DEFAULT_QUANTITY_COLUMN = 9  # I

# Thai ERP export labels: stock-keeping item, ready-to-sell stock, ready to sell.
_STOCK_ITEM_LABEL = "สินค้าคงคลัง"
_READY_STOCK_LABEL = "สต็อกพร้อมขาย"
_READY_LABEL = "พร้อมขาย"


@dataclass(frozen=True, slots=True)
class ColumnRule:
    """Defines how one logical column is found in a header row."""

    name: str
    matchers: tuple[HeaderMatcher, ...]
    fallback_column: int


CODE_COLUMN_RULE = ColumnRule(
    name="code",
    matchers=(
        lambda header: header.upper() == "SKU",
        lambda header: "SKU" in header.upper(),
        lambda header: _STOCK_ITEM_LABEL in header and "SKU" in header.upper(),
    ),
    fallback_column=DEFAULT_CODE_COLUMN,
)

QUANTITY_COLUMN_RULE = ColumnRule(
    name="quantity",
    matchers=(
        lambda header: _READY_STOCK_LABEL in header,
        lambda header: _READY_LABEL in header,
        lambda header: "AVAILABLE" in header.upper(),
        lambda header: "READY" in header.upper(),
    ),
    fallback_column=DEFAULT_QUANTITY_COLUMN,
)


def _normalize_header_row(values: Sequence[Any]) -> list[str]:
    """Normalize header cells so matching ignores surrounding whitespace."""

    return [cell_text(value) for value in values]


def detect_header_row(
    worksheet: Worksheet,
    *,
    scan_rows: int = HEADER_SCAN_ROWS,
    min_cells: int = MIN_HEADER_CELLS,
) -> int:
    """Return the 1-based header row: the first dense row near the top, else 1."""

    last_row = min(scan_rows, worksheet.max_row)
    rows = worksheet.iter_rows(min_row=1, max_row=last_row, values_only=True)
    for row_number, values in enumerate(rows, start=1):
        non_empty = sum(1 for header in _normalize_header_row(values) if header)
        if non_empty >= min_cells:
            return row_number
    return 1


def find_column(headers: Sequence[str], rule: ColumnRule) -> int | None:
    """Return the 1-based index of the first header matching any of `rule`'s matchers."""

    for index, header in enumerate(headers, start=1):
        if not header:
            continue
        if any(matcher(header) for matcher in rule.matchers):
            return index
    return None


def read_header_row(worksheet: Worksheet, row_number: int) -> list[str]:
    """Return normalized header texts for one worksheet row."""

    rows = worksheet.iter_rows(min_row=row_number, max_row=row_number, values_only=True)
    for values in rows:
        return _normalize_header_row(values)
    return []


def locate_columns(
    worksheet: Worksheet,
    *,
    code_rule: ColumnRule = CODE_COLUMN_RULE,
    quantity_rule: ColumnRule = QUANTITY_COLUMN_RULE,
) -> ColumnLocation:
    """Locate the header row, code column and quantity column of a worksheet.

    Header names are tried first. When a column cannot be recognized the
    rule's fixed position is used instead, so this never fails; the fallback
    is logged so the positional assumption can be checked.
    """

    header_row = detect_header_row(worksheet)
    headers = read_header_row(worksheet, header_row)

    code_column = find_column(headers, code_rule)
    quantity_column = find_column(headers, quantity_rule)

    for rule, found in ((code_rule, code_column), (quantity_rule, quantity_column)):
        if found is None:
            logger.warning(
                "No %s column recognized in header row %d of sheet %r; using column %d",
                rule.name,
                header_row,
                worksheet.title,
                rule.fallback_column,
            )

    return ColumnLocation(
        header_row=header_row,
        code_column=code_rule.fallback_column if code_column is None else code_column,
        quantity_column=quantity_rule.fallback_column if quantity_column is None else quantity_column,
        code_from_header=code_column is not None,
        quantity_from_header=quantity_column is not None,
    )

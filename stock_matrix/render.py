"""Fixed-layout stock-check worksheet rendering.

Layout (1-based rows, Excel columns)::

    row 1-2   C1:G2 title block        H1:I1 date label / H2:I2 date
    row 3     model | color | S | M | L | XL | XXL | 3XL | 4XL
    row 4..   one row per matrix cell, in matrix order

The layout reproduces an existing paper form, so positions, widths, borders
and the low-stock font tiers are fixed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from openpyxl import Workbook
from openpyxl.cell.cell import Cell
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .models import SIZES, MatrixCell
from .normalize import compact_report_date, format_report_date

logger = logging.getLogger(__name__)

REPORT_TITLE = "ใบเช็คสต็อก"
HEADER_ROW = 3
FIRST_DATA_ROW = HEADER_ROW + 1
FIRST_SIZE_COLUMN = 3
LAST_COLUMN = FIRST_SIZE_COLUMN + len(SIZES) - 1
LABEL_COLUMN_WIDTHS = (10, 16)
SIZE_COLUMN_WIDTH = 9
DEFAULT_ROW_HEIGHT = 20

THIN = Side(style="thin", color="FF000000")
MEDIUM = Side(style="medium", color="FF000000")
WHITE_FILL = PatternFill(fill_type="solid", start_color="FFFFFFFF", end_color="FFFFFFFF")
DATE_LABEL_FILL = PatternFill(fill_type="solid", start_color="FFF3F4F6", end_color="FFF3F4F6")
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")


@dataclass(frozen=True, slots=True)
class ReportLabels:
    """Text placed on the report; swapped by the localization layer."""

    title: str = REPORT_TITLE
    model: str = "รุ่น"
    color: str = "สี"
    date_label: str = "วันที่อัปเดต"
    sheet_title: str = REPORT_TITLE


@dataclass(frozen=True, slots=True)
class StyleTier:
    """One low-stock emphasis tier for quantity cells."""

    name: str
    applies: Callable[[int], bool]
    font: Font


# Ordered: the first tier whose predicate matches wins.
QUANTITY_STYLE_TIERS: tuple[StyleTier, ...] = (
    StyleTier(name="empty", applies=lambda value: value == 0, font=Font(color="FF6B7280")),
    StyleTier(name="low", applies=lambda value: value <= 5, font=Font(color="FFB45309", bold=True)),
    StyleTier(name="normal", applies=lambda value: True, font=Font(color="FF111827")),
)


def quantity_style(value: int, tiers: Sequence[StyleTier] = QUANTITY_STYLE_TIERS) -> StyleTier:
    """Return the style tier for a quantity value."""

    for tier in tiers:
        if tier.applies(value):
            return tier
    raise ValueError(f"No style tier matches quantity {value}")


def _border_box(side: Side) -> Border:
    return Border(left=side, right=side, top=side, bottom=side)


def _table_border(row: int, column: int, last_row: int) -> Border:
    """Thin inner grid with a medium outline around the whole table."""

    if row == HEADER_ROW:
        return _border_box(MEDIUM)
    return Border(
        top=THIN,
        bottom=MEDIUM if row == last_row else THIN,
        left=MEDIUM if column == 1 else THIN,
        right=MEDIUM if column == LAST_COLUMN else THIN,
    )


def _style(cell: Cell, *, font: Font | None = None, alignment: Alignment, border: Border) -> None:
    if font is not None:
        cell.font = font
    cell.alignment = alignment
    cell.border = border
    cell.fill = WHITE_FILL


def render_report(
    matrix: Sequence[MatrixCell],
    report_date: date | str,
    *,
    labels: ReportLabels = ReportLabels(),
) -> Workbook:
    """Render the matrix into a single-sheet, print-ready workbook."""

    workbook = Workbook()
    workbook.properties.creator = "ERP Stock Checker"
    sheet = workbook.active
    sheet.title = labels.sheet_title
    sheet.freeze_panes = f"A{FIRST_DATA_ROW}"
    sheet.sheet_format.defaultRowHeight = DEFAULT_ROW_HEIGHT

    for column, width in enumerate(LABEL_COLUMN_WIDTHS, start=1):
        sheet.column_dimensions[get_column_letter(column)].width = width
    for column in range(FIRST_SIZE_COLUMN, LAST_COLUMN + 1):
        sheet.column_dimensions[get_column_letter(column)].width = SIZE_COLUMN_WIDTH

    # Title block
    sheet.merge_cells("C1:G2")
    title = sheet["C1"]
    title.value = labels.title
    title.font = Font(size=28, bold=True)
    title.alignment = CENTER
    title.fill = WHITE_FILL

    # Date box
    sheet.merge_cells("H1:I1")
    sheet.merge_cells("H2:I2")
    date_label = sheet["H1"]
    date_label.value = labels.date_label
    date_label.font = Font(size=14, bold=True)
    date_label.alignment = CENTER
    date_label.fill = DATE_LABEL_FILL

    date_value = sheet["H2"]
    date_value.value = format_report_date(report_date)
    date_value.font = Font(size=14, bold=True)
    date_value.alignment = CENTER
    date_value.fill = WHITE_FILL

    for coordinate in ("H1", "I1", "H2", "I2"):
        sheet[coordinate].border = _border_box(MEDIUM)

    last_row = HEADER_ROW + len(matrix)

    headers = [labels.model, labels.color, *SIZES]
    for column, text in enumerate(headers, start=1):
        cell = sheet.cell(row=HEADER_ROW, column=column, value=text)
        _style(cell, font=Font(bold=True), alignment=CENTER, border=_table_border(HEADER_ROW, column, last_row))

    for row, item in enumerate(matrix, start=FIRST_DATA_ROW):
        for column, text in enumerate((item.model, item.color), start=1):
            cell = sheet.cell(row=row, column=column, value=text)
            _style(cell, alignment=LEFT, border=_table_border(row, column, last_row))

        for offset, quantity in enumerate(item.quantities):
            column = FIRST_SIZE_COLUMN + offset
            cell = sheet.cell(row=row, column=column, value=quantity)
            _style(
                cell,
                font=quantity_style(quantity).font,
                alignment=CENTER,
                border=_table_border(row, column, last_row),
            )

    logger.info("Rendered stock-check sheet with %d rows", len(matrix))
    return workbook


def default_report_filename(report_date: date | str) -> str:
    """Return the conventional report file name for a report date."""

    return f"{REPORT_TITLE}_{compact_report_date(report_date)}.xlsx"


def write_report(workbook: Workbook, path: str | Path) -> Path:
    """Save the report workbook, creating parent directories."""

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output_path)
    return output_path

"""Worksheet ingestion: located columns + code grammar -> validated stock rows."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from io import BytesIO
from os import PathLike
from typing import Any, BinaryIO, TypeAlias
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from .codes import parse_code
from .columns import locate_columns
from .models import (
    ColumnLocation,
    FileIngestResult,
    IngestError,
    IngestResult,
    ParseFailure,
    QuantityWarning,
    SourceRow,
)
from .normalize import cell_text, coerce_quantity

logger = logging.getLogger(__name__)

WorksheetSource: TypeAlias = Workbook | Worksheet | str | PathLike | bytes | BinaryIO | None
NamedSource: TypeAlias = tuple[str, WorksheetSource]


def load_first_worksheet(source: WorksheetSource) -> Worksheet | None:
    """Return the first worksheet of `source`, or None when it has none.

    Files are opened with `data_only=True` so formula cells expose the result
    Excel cached when the export was saved.
    """

    if source is None:
        return None
    if isinstance(source, Worksheet):
        return source
    if isinstance(source, Workbook):
        workbook = source
    elif isinstance(source, (bytes, bytearray)):
        workbook = load_workbook(BytesIO(source), data_only=True)
    elif isinstance(source, (str, PathLike)) or hasattr(source, "read"):
        workbook = load_workbook(source, data_only=True)
    else:
        raise TypeError(f"Unsupported worksheet source: {type(source).__name__}")

    if not workbook.worksheets:
        return None
    return workbook.worksheets[0]


def _cell_at(values: tuple[Any, ...], column: int) -> Any:
    """Return the value at a 1-based column, or None past the row's end."""

    if column > len(values):
        return None
    return values[column - 1]


def ingest_worksheet(file_name: str, worksheet: Worksheet) -> FileIngestResult:
    """Ingest every data row below the detected header row of one worksheet."""

    columns = locate_columns(worksheet)
    result = FileIngestResult(file_name=file_name, columns=columns)

    rows = worksheet.iter_rows(min_row=columns.header_row + 1, values_only=True)
    for row_number, values in enumerate(rows, start=columns.header_row + 1):
        sku = cell_text(_cell_at(values, columns.code_column))
        if not sku:
            continue

        quantity_value = _cell_at(values, columns.quantity_column)
        quantity, readable = coerce_quantity(quantity_value)

        parsed = parse_code(sku)
        if isinstance(parsed, ParseFailure):
            logger.debug("%s row %d: cannot parse code %r (%s)", file_name, row_number, sku, parsed.reason)
            result.errors.append(IngestError(file=file_name, sku=sku, reason=parsed.reason))
            continue

        if not readable:
            logger.debug("%s row %d: quantity %r counted as 0", file_name, row_number, quantity_value)
            result.warnings.append(
                QuantityWarning(file=file_name, row=row_number, sku=sku, raw_value=str(quantity_value))
            )

        result.rows.append(SourceRow(source_file=file_name, code=parsed, quantity=quantity))

    logger.info(
        "%s: %d rows, %d errors, header row %d, code column %d, quantity column %d",
        file_name,
        result.total_rows,
        len(result.errors),
        columns.header_row,
        columns.code_column,
        columns.quantity_column,
    )
    return result


def _missing_worksheet(file_name: str) -> FileIngestResult:
    return FileIngestResult(
        file_name=file_name,
        columns=None,
        errors=[IngestError(file=file_name, sku="", reason="no-worksheet")],
    )


def ingest_file(file_name: str, source: WorksheetSource) -> FileIngestResult:
    """Ingest the first worksheet of one source file.

    A file that cannot be opened as a workbook is recorded like a file without
    worksheets, so the rest of the batch is still read.
    """

    try:
        worksheet = load_first_worksheet(source)
    except (OSError, BadZipFile, InvalidFileException) as exc:
        logger.warning("%s: cannot open workbook: %s", file_name, exc)
        return _missing_worksheet(file_name)

    if worksheet is None:
        logger.warning("%s: no worksheet found", file_name)
        return _missing_worksheet(file_name)
    return ingest_worksheet(file_name, worksheet)


def iter_ingest(files: Iterable[NamedSource]) -> Iterator[FileIngestResult]:
    """Yield one fully ingested result per file, in caller order.

    Stopping iteration between files abandons the run without leaving a
    partially read file behind.
    """

    for file_name, source in files:
        yield ingest_file(file_name, source)


def ingest(files: Iterable[NamedSource]) -> IngestResult:
    """Ingest every file and return rows, errors and warnings together."""

    return IngestResult(files=list(iter_ingest(files)))


def located_columns(result: IngestResult) -> dict[str, ColumnLocation | None]:
    """Return the column location used for each ingested file."""

    return {file_result.file_name: file_result.columns for file_result in result.files}

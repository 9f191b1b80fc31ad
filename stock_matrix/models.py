"""Core typed models shared by the ingest, aggregation and report modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias, TypedDict

Size: TypeAlias = Literal["S", "M", "L", "XL", "XXL", "3XL", "4XL"]
ParseFailureReason: TypeAlias = Literal[
    "empty",
    "missing-dash",
    "bad-format",
    "unknown-size",
    "missing-color",
]
IngestErrorReason: TypeAlias = ParseFailureReason | Literal["no-worksheet"]

# Display order. Suffix matching walks this tuple backwards.
SIZES: tuple[Size, ...] = ("S", "M", "L", "XL", "XXL", "3XL", "4XL")
SIZE_MATCH_ORDER: tuple[Size, ...] = tuple(reversed(SIZES))


@dataclass(frozen=True, slots=True)
class ProductCode:
    """Structured product code: `model-<color><size>`."""

    model: str
    color: str
    size: Size
    raw: str


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """Terminal failure to parse a product code."""

    raw: str
    reason: ParseFailureReason


@dataclass(frozen=True, slots=True)
class IngestError:
    """Row or file level failure recorded while ingesting a source file."""

    file: str
    sku: str
    reason: IngestErrorReason


@dataclass(frozen=True, slots=True)
class QuantityWarning:
    """A non-empty quantity cell that could not be read and was counted as 0."""

    file: str
    row: int
    sku: str
    raw_value: str


@dataclass(frozen=True, slots=True)
class SourceRow:
    """One successfully parsed stock row from a source file."""

    source_file: str
    code: ProductCode
    quantity: int

    @property
    def model(self) -> str:
        return self.code.model

    @property
    def color(self) -> str:
        return self.code.color

    @property
    def size(self) -> Size:
        return self.code.size


@dataclass(frozen=True, slots=True)
class ColumnLocation:
    """Located 1-based header row and columns for one worksheet."""

    header_row: int
    code_column: int
    quantity_column: int
    code_from_header: bool = True
    quantity_from_header: bool = True


@dataclass(frozen=True, slots=True)
class MatrixCell:
    """Aggregated quantities for one `(model, color)` pair.

    `quantities` holds one value per size in `SIZES` order.
    """

    model: str
    color: str
    quantities: tuple[int, ...] = (0,) * len(SIZES)

    def quantity(self, size: Size) -> int:
        """Return the quantity stored for `size`."""

        return self.quantities[SIZES.index(size)]

    def by_size(self) -> dict[Size, int]:
        """Return quantities keyed by size, in display order."""

        return dict(zip(SIZES, self.quantities))

    @property
    def total(self) -> int:
        return sum(self.quantities)


@dataclass(slots=True)
class FileIngestResult:
    """Ingest output for one source file."""

    file_name: str
    columns: ColumnLocation | None
    rows: list[SourceRow] = field(default_factory=list)
    errors: list[IngestError] = field(default_factory=list)
    warnings: list[QuantityWarning] = field(default_factory=list)

    @property
    def has_worksheet(self) -> bool:
        return self.columns is not None

    @property
    def total_rows(self) -> int:
        """Return the number of successfully parsed rows."""

        return len(self.rows)

    @property
    def total_quantity(self) -> int:
        return sum(row.quantity for row in self.rows)


@dataclass(slots=True)
class IngestResult:
    """Container for every ingested file, in caller order."""

    files: list[FileIngestResult] = field(default_factory=list)

    @property
    def rows(self) -> list[SourceRow]:
        """Return a flat list of parsed rows from all files."""

        return [row for result in self.files for row in result.rows]

    @property
    def errors(self) -> list[IngestError]:
        return [error for result in self.files for error in result.errors]

    @property
    def warnings(self) -> list[QuantityWarning]:
        return [warning for result in self.files for warning in result.warnings]


@dataclass(frozen=True, slots=True)
class AggregateResult:
    """Sorted matrix plus the sorted distinct models it contains."""

    matrix: tuple[MatrixCell, ...]
    models: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    """Quantity totals before and after aggregation."""

    raw_total: int
    matrix_total: int
    diff: int
    per_file: tuple[tuple[str, int], ...]

    @property
    def ok(self) -> bool:
        """Return whether aggregation conserved every unit of stock."""

        return self.diff == 0


class DuplicateMergeInfo(TypedDict):
    """A `(model, color, size)` key filled from more than one row by addition."""

    model: str
    color: str
    size: Size
    row_count: int
    merged_quantity: int

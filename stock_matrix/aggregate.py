"""Fold parsed stock rows into a size matrix keyed by model and color."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence

from .models import SIZES, AggregateResult, DuplicateMergeInfo, MatrixCell, Size, SourceRow

MatrixKey = tuple[str, str]
SizeKey = tuple[str, str, Size]


def aggregate(rows: Iterable[SourceRow]) -> AggregateResult:
    """Build the size matrix from parsed rows.

    Rows sharing a `(model, color, size)` key are merged by addition, never
    overwritten, so duplicates across files are kept as real stock. Keys are
    compared exactly as parsed (case-sensitive). Every cell starts with all
    sizes at 0, and cells are sorted by model, then color.
    """

    slots: dict[MatrixKey, list[int]] = {}
    for row in rows:
        key = (row.model, row.color)
        if key not in slots:
            slots[key] = [0] * len(SIZES)
        slots[key][SIZES.index(row.size)] += row.quantity

    matrix = tuple(
        MatrixCell(model=model, color=color, quantities=tuple(slots[(model, color)]))
        for model, color in sorted(slots)
    )
    models = tuple(sorted({model for model, _ in slots}))
    return AggregateResult(matrix=matrix, models=models)


def detect_merged_duplicates(rows: Iterable[SourceRow]) -> list[DuplicateMergeInfo]:
    """Return size slots that were filled from more than one row by addition."""

    row_counts: defaultdict[SizeKey, int] = defaultdict(int)
    merged_totals: defaultdict[SizeKey, int] = defaultdict(int)

    for row in rows:
        key = (row.model, row.color, row.size)
        row_counts[key] += 1
        merged_totals[key] += row.quantity

    duplicates: list[DuplicateMergeInfo] = []
    for key in sorted(row_counts, key=lambda item: (item[0], item[1], SIZES.index(item[2]))):
        if row_counts[key] <= 1:
            continue
        model, color, size = key
        duplicates.append(
            {
                "model": model,
                "color": color,
                "size": size,
                "row_count": row_counts[key],
                "merged_quantity": merged_totals[key],
            }
        )
    return duplicates


def filter_matrix(
    matrix: Sequence[MatrixCell],
    *,
    model: str | None = None,
    query: str | None = None,
) -> tuple[MatrixCell, ...]:
    """Return the cells matching a model and/or a model/color search text.

    The view keeps matrix order and never alters cell quantities.
    """

    needle = (query or "").strip().casefold()
    selected: list[MatrixCell] = []
    for cell in matrix:
        if model is not None and cell.model != model:
            continue
        if needle and needle not in cell.model.casefold() and needle not in cell.color.casefold():
            continue
        selected.append(cell)
    return tuple(selected)

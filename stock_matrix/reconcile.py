"""Quantity reconciliation between parsed rows and the aggregated matrix."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable

from .models import MatrixCell, ReconciliationResult, SourceRow

logger = logging.getLogger(__name__)


def total_by_file(rows: Iterable[SourceRow]) -> tuple[tuple[str, int], ...]:
    """Sum row quantities per source file, sorted by file name."""

    totals: defaultdict[str, int] = defaultdict(int)
    for row in rows:
        totals[row.source_file] += row.quantity
    return tuple(sorted(totals.items()))


def reconcile(rows: Iterable[SourceRow], matrix: Iterable[MatrixCell]) -> ReconciliationResult:
    """Compare the parsed-row total with the matrix total.

    Detection only: nothing is corrected, and a non-zero `diff` marks the run
    as suspect rather than failing it.
    """

    rows = list(rows)
    raw_total = sum(row.quantity for row in rows)
    matrix_total = sum(cell.total for cell in matrix)
    return ReconciliationResult(
        raw_total=raw_total,
        matrix_total=matrix_total,
        diff=raw_total - matrix_total,
        per_file=total_by_file(rows),
    )


def log_reconciliation(result: ReconciliationResult) -> None:
    """Log the reconciliation outcome; mismatches are warnings."""

    if result.ok:
        logger.info("Stock totals match: %d units", result.raw_total)
        return
    logger.warning(
        "Stock totals differ: rows=%d matrix=%d diff=%d",
        result.raw_total,
        result.matrix_total,
        result.diff,
    )

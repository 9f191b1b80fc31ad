"""One stock-check run: ingest -> aggregate -> reconcile, as an explicit value."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .aggregate import aggregate
from .models import AggregateResult, IngestResult, MatrixCell, ReconciliationResult
from .parser import NamedSource, ingest
from .reconcile import log_reconciliation, reconcile

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PipelineMetrics:
    """Counts the surrounding application shows next to the matrix."""

    uploaded_files: int
    parsed_rows: int
    distinct_pairs: int
    distinct_skus: int
    error_count: int
    warning_count: int
    reconciliation: ReconciliationResult


@dataclass(frozen=True, slots=True)
class PipelineRun:
    """Everything one run produced. Nothing outside the run is mutated."""

    ingested: IngestResult
    aggregated: AggregateResult
    reconciliation: ReconciliationResult

    @property
    def matrix(self) -> tuple[MatrixCell, ...]:
        return self.aggregated.matrix

    @property
    def models(self) -> tuple[str, ...]:
        return self.aggregated.models

    @property
    def metrics(self) -> PipelineMetrics:
        rows = self.ingested.rows
        return PipelineMetrics(
            uploaded_files=len(self.ingested.files),
            parsed_rows=len(rows),
            distinct_pairs=len(self.matrix),
            distinct_skus=len({(row.model, row.color, row.size) for row in rows}),
            error_count=len(self.ingested.errors),
            warning_count=len(self.ingested.warnings),
            reconciliation=self.reconciliation,
        )


def build_run(ingested: IngestResult) -> PipelineRun:
    """Aggregate and reconcile already ingested files."""

    rows = ingested.rows
    aggregated = aggregate(rows)
    reconciliation = reconcile(rows, aggregated.matrix)
    log_reconciliation(reconciliation)
    return PipelineRun(ingested=ingested, aggregated=aggregated, reconciliation=reconciliation)


def run_pipeline(files: Iterable[NamedSource]) -> PipelineRun:
    """Ingest all files, then aggregate and reconcile the parsed rows."""

    run = build_run(ingest(files))
    metrics = run.metrics
    logger.info(
        "Processed %d files: %d rows, %d model/color rows, %d errors",
        metrics.uploaded_files,
        metrics.parsed_rows,
        metrics.distinct_pairs,
        metrics.error_count,
    )
    return run

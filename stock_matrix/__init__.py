"""Public API exports for the ERP stock-check pipeline."""

from .aggregate import aggregate, detect_merged_duplicates, filter_matrix
from .codes import parse_code
from .columns import ColumnRule, locate_columns
from .errors_csv import format_error_report, write_error_report
from .models import (
    SIZES,
    AggregateResult,
    ColumnLocation,
    DuplicateMergeInfo,
    FileIngestResult,
    IngestError,
    IngestResult,
    MatrixCell,
    ParseFailure,
    ProductCode,
    QuantityWarning,
    ReconciliationResult,
    Size,
    SourceRow,
)
from .parser import ingest, iter_ingest
from .pipeline import PipelineMetrics, PipelineRun, run_pipeline
from .reconcile import reconcile
from .render import ReportLabels, render_report, write_report

__all__ = [
    "SIZES",
    "AggregateResult",
    "ColumnLocation",
    "ColumnRule",
    "DuplicateMergeInfo",
    "FileIngestResult",
    "IngestError",
    "IngestResult",
    "MatrixCell",
    "ParseFailure",
    "PipelineMetrics",
    "PipelineRun",
    "ProductCode",
    "QuantityWarning",
    "ReconciliationResult",
    "ReportLabels",
    "Size",
    "SourceRow",
    "aggregate",
    "detect_merged_duplicates",
    "filter_matrix",
    "format_error_report",
    "ingest",
    "iter_ingest",
    "locate_columns",
    "parse_code",
    "reconcile",
    "render_report",
    "run_pipeline",
    "write_error_report",
    "write_report",
]

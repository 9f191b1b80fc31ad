"""Command-line runner for the ERP stock-check report.

Reads one or more ERP stock exports, builds the size matrix, checks that no
stock was lost during aggregation, and writes the stock-check workbook plus an
error CSV for codes that could not be parsed. A JSON run summary can be
written with `--summary-output`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from stock_matrix import detect_merged_duplicates, filter_matrix, render_report, run_pipeline, write_report
from stock_matrix.errors_csv import default_error_filename, write_error_report
from stock_matrix.models import IngestError, QuantityWarning
from stock_matrix.normalize import parse_report_date
from stock_matrix.parser import located_columns
from stock_matrix.pipeline import PipelineRun
from stock_matrix.render import ReportLabels, default_report_filename

logger = logging.getLogger("stockcheck")


def _error_to_dict(error: IngestError) -> dict[str, str]:
    """Serialize an `IngestError` into a JSON-friendly dictionary."""

    return {"file": error.file, "sku": error.sku, "reason": error.reason}


def _warning_to_dict(warning: QuantityWarning) -> dict[str, Any]:
    return {
        "file": warning.file,
        "row": warning.row,
        "sku": warning.sku,
        "raw_value": warning.raw_value,
    }


def build_summary(run: PipelineRun, *, report_date: date) -> dict[str, Any]:
    """Build the JSON run summary: metrics, totals check and data-quality issues."""

    metrics = run.metrics
    reconciliation = run.reconciliation

    columns: dict[str, Any] = {}
    for file_name, location in located_columns(run.ingested).items():
        if location is None:
            columns[file_name] = None
            continue
        columns[file_name] = {
            "header_row": location.header_row,
            "code_column": location.code_column,
            "quantity_column": location.quantity_column,
            "code_from_header": location.code_from_header,
            "quantity_from_header": location.quantity_from_header,
        }

    return {
        "metadata": {
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "report_date": report_date.isoformat(),
            "deterministic_merge_rule": (
                "Rows resolving to the same model, color and size are merged by addition, "
                "including rows from different files."
            ),
        },
        "summary": {
            "uploaded_files": metrics.uploaded_files,
            "parsed_rows": metrics.parsed_rows,
            "model_color_rows": metrics.distinct_pairs,
            "distinct_skus": metrics.distinct_skus,
            "error_count": metrics.error_count,
            "quantity_warning_count": metrics.warning_count,
            "models": list(run.models),
        },
        "reconciliation": {
            "raw_total": reconciliation.raw_total,
            "matrix_total": reconciliation.matrix_total,
            "diff": reconciliation.diff,
            "ok": reconciliation.ok,
            "per_file": [{"file": name, "quantity": quantity} for name, quantity in reconciliation.per_file],
        },
        "columns": columns,
        "data_quality_issues": {
            "errors": [_error_to_dict(error) for error in run.ingested.errors],
            "quantity_warnings": [_warning_to_dict(warning) for warning in run.ingested.warnings],
            "duplicate_skus_merged_by_addition": detect_merged_duplicates(run.ingested.rows),
        },
    }


def write_summary(summary: dict[str, Any], *, output_path: Path) -> None:
    """Write summary JSON to disk."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(summary, indent=2, sort_keys=True, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for report generation."""

    parser = argparse.ArgumentParser(description="Build a stock-check workbook from ERP stock exports.")
    parser.add_argument("files", nargs="+", type=Path, help="ERP export workbooks (.xlsx)")
    parser.add_argument(
        "--date",
        type=parse_report_date,
        default=date.today(),
        help="Report date as YYYY-MM-DD (default: today)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Output workbook path")
    parser.add_argument("--errors-output", type=Path, default=None, help="Output error CSV path")
    parser.add_argument("--summary-output", type=Path, default=None, help="Optional JSON run summary path")
    parser.add_argument("--title", default=None, help="Report title text")
    parser.add_argument("--model", default=None, help="Only export rows for this model")
    parser.add_argument("--query", default=None, help="Only export rows whose model or color contains this text")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for command-line execution."""

    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    report_date: date = args.date
    output_path = args.output or Path(default_report_filename(report_date))
    errors_path = args.errors_output or Path(default_error_filename(report_date))

    run = run_pipeline((path.name, path) for path in args.files)

    matrix = run.matrix
    if args.model is not None or args.query:
        filtered = filter_matrix(matrix, model=args.model, query=args.query)
        if filtered:
            matrix = filtered
            logger.info("Exporting %d of %d rows after filtering", len(matrix), len(run.matrix))
        else:
            logger.warning("No rows match the model/query filter; exporting all %d rows", len(matrix))

    labels = ReportLabels() if args.title is None else ReportLabels(title=args.title)
    write_report(render_report(matrix, report_date, labels=labels), output_path)
    print(f"Wrote stock-check report: {output_path}")

    if run.ingested.errors:
        write_error_report(run.ingested.errors, output_path=errors_path)
        print(f"Wrote error report ({len(run.ingested.errors)} rows): {errors_path}")

    if args.summary_output is not None:
        write_summary(build_summary(run, report_date=report_date), output_path=args.summary_output)
        print(f"Wrote run summary: {args.summary_output}")

    if not run.reconciliation.ok:
        print(f"WARNING: stock totals differ by {run.reconciliation.diff}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

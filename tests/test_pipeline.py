"""Tests for a full pipeline run and the metrics it exposes."""

from __future__ import annotations

from openpyxl import Workbook

from stock_matrix.pipeline import run_pipeline


def test_run_pipeline_exposes_metrics(make_workbook, erp_rows) -> None:
    """A run reports file, row, pair, sku, error and warning counts."""
    empty = Workbook()
    empty.remove(empty.active)
    files = [
        ("T009.xlsx", make_workbook(erp_rows([("T009-BLACKS", 2), ("T009-BLACKM", 1), ("BROKEN", 9)]))),
        ("T111.xlsx", make_workbook(erp_rows([("T009-BLACKS", 4), ("T111-WHITEXL", "n/a")]))),
        ("empty.xlsx", empty),
    ]

    run = run_pipeline(files)
    metrics = run.metrics

    assert metrics.uploaded_files == 3
    assert metrics.parsed_rows == 4
    assert metrics.distinct_pairs == 2
    assert metrics.distinct_skus == 3
    assert metrics.error_count == 2
    assert metrics.warning_count == 1
    assert metrics.reconciliation.ok is True
    assert metrics.reconciliation.raw_total == 7
    assert run.models == ("T009", "T111")
    assert run.matrix[0].quantity("S") == 6


def test_run_pipeline_runs_are_independent(make_workbook, erp_rows) -> None:
    """Nothing carries over between runs."""
    first = run_pipeline([("a.xlsx", make_workbook(erp_rows([("A-REDS", 1)])))])
    second = run_pipeline([("b.xlsx", make_workbook(erp_rows([("B-BLUES", 2)])))])

    assert [cell.model for cell in first.matrix] == ["A"]
    assert [cell.model for cell in second.matrix] == ["B"]
    assert second.reconciliation.per_file == (("b.xlsx", 2),)


def test_run_pipeline_with_only_bad_rows_is_empty_but_valid(make_workbook, erp_rows) -> None:
    """The worst outcome is an empty matrix with a full error log."""
    run = run_pipeline([("bad.xlsx", make_workbook(erp_rows([("NODASH", 1), ("A-S", 2)])))])

    assert run.matrix == ()
    assert [error.reason for error in run.ingested.errors] == ["missing-dash", "missing-color"]
    assert run.reconciliation.ok is True

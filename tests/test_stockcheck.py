"""Tests for the command-line runner and its JSON run summary."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

from openpyxl import load_workbook

from stock_matrix.pipeline import run_pipeline
from stockcheck import build_summary, main, write_summary


def _save(path: Path, workbook) -> Path:
    workbook.save(path)
    return path


def test_build_summary_has_required_sections(make_workbook, erp_rows) -> None:
    """The summary exposes metrics, totals check, columns and data-quality issues."""
    run = run_pipeline(
        [
            ("F1", make_workbook(erp_rows([("A-REDS", 3), ("A-QQQ", 1), ("A-REDM", "x")]))),
            ("F2", make_workbook(erp_rows([("A-REDS", 5)]))),
        ]
    )

    summary = build_summary(run, report_date=date(2024, 3, 5))

    assert summary["metadata"]["report_date"] == "2024-03-05"
    assert "addition" in summary["metadata"]["deterministic_merge_rule"]
    assert summary["summary"]["parsed_rows"] == 3
    assert summary["summary"]["error_count"] == 1
    assert summary["summary"]["quantity_warning_count"] == 1
    assert summary["reconciliation"] == {
        "raw_total": 8,
        "matrix_total": 8,
        "diff": 0,
        "ok": True,
        "per_file": [{"file": "F1", "quantity": 3}, {"file": "F2", "quantity": 5}],
    }
    assert summary["columns"]["F1"]["code_column"] == 2
    assert summary["columns"]["F1"]["quantity_column"] == 9
    assert summary["data_quality_issues"]["errors"] == [{"file": "F1", "sku": "A-QQQ", "reason": "unknown-size"}]
    assert summary["data_quality_issues"]["duplicate_skus_merged_by_addition"] == [
        {"model": "A", "color": "RED", "size": "S", "row_count": 2, "merged_quantity": 8}
    ]


def test_write_summary_writes_valid_json(tmp_path: Path) -> None:
    """`write_summary` should create the parent directory and emit valid JSON."""
    output_path = tmp_path / "output" / "summary.json"
    summary = {"metadata": {"report_date": "2024-03-05"}, "summary": {"models": ["ทดสอบ"]}}

    write_summary(summary, output_path=output_path)

    assert json.loads(output_path.read_text(encoding="utf-8")) == summary


def test_main_writes_report_errors_and_summary(tmp_path: Path, make_workbook, erp_rows, capsys) -> None:
    """The runner writes all three outputs for a batch with bad codes."""
    first = _save(tmp_path / "T009.xlsx", make_workbook(erp_rows([("T009-BLACKS", 2), ("NODASH", 1)])))
    second = _save(tmp_path / "T111.xlsx", make_workbook(erp_rows([("T111-WHITEXL", 7)])))
    report = tmp_path / "out" / "report.xlsx"
    errors = tmp_path / "out" / "errors.csv"
    summary = tmp_path / "out" / "summary.json"

    exit_code = main(
        [
            str(first),
            str(second),
            "--date",
            "2024-03-05",
            "--output",
            str(report),
            "--errors-output",
            str(errors),
            "--summary-output",
            str(summary),
        ]
    )

    assert exit_code == 0
    sheet = load_workbook(report).active
    assert [sheet.cell(row=row, column=1).value for row in (4, 5)] == ["T009", "T111"]
    assert sheet["H2"].value == "05/03/2024"
    assert errors.read_text(encoding="utf-8-sig").splitlines()[1] == '"T009.xlsx","NODASH","missing-dash"'
    assert json.loads(summary.read_text(encoding="utf-8"))["reconciliation"]["raw_total"] == 9
    assert "Wrote stock-check report" in capsys.readouterr().out


def test_main_filters_exported_rows_and_skips_empty_error_report(tmp_path: Path, make_workbook, erp_rows) -> None:
    """`--model` narrows the exported rows; no error CSV is written without errors."""
    source = _save(tmp_path / "mixed.xlsx", make_workbook(erp_rows([("T009-BLACKS", 2), ("T111-WHITEXL", 7)])))
    report = tmp_path / "report.xlsx"
    errors = tmp_path / "errors.csv"

    exit_code = main(
        [str(source), "--date", "2024-03-05", "--output", str(report), "--errors-output", str(errors), "--model", "T111"]
    )

    assert exit_code == 0
    sheet = load_workbook(report).active
    assert sheet.max_row == 4
    assert sheet["A4"].value == "T111"
    assert not errors.exists()


def test_main_filter_without_matches_exports_full_matrix(tmp_path: Path, make_workbook, erp_rows) -> None:
    """A `--model` that matches nothing falls back to every row instead of an empty report."""
    source = _save(tmp_path / "mixed.xlsx", make_workbook(erp_rows([("T009-BLACKS", 2), ("T111-WHITEXL", 7)])))
    report = tmp_path / "report.xlsx"

    exit_code = main([str(source), "--date", "2024-03-05", "--output", str(report), "--model", "NOPE"])

    assert exit_code == 0
    sheet = load_workbook(report).active
    assert sheet.max_row == 3 + 2
    assert [sheet["A4"].value, sheet["A5"].value] == ["T009", "T111"]


def test_main_records_unreadable_files_and_keeps_going(tmp_path: Path, make_workbook, erp_rows) -> None:
    """Files that are not workbooks land in the error CSV; the other files are still reported."""
    bogus = tmp_path / "not-a-workbook.xlsx"
    bogus.write_text("plain text", encoding="utf-8")
    source = _save(tmp_path / "good.xlsx", make_workbook(erp_rows([("T009-BLACKS", 2)])))
    report = tmp_path / "report.xlsx"
    errors = tmp_path / "errors.csv"

    exit_code = main(
        [str(bogus), str(source), "--date", "2024-03-05", "--output", str(report), "--errors-output", str(errors)]
    )

    assert exit_code == 0
    assert load_workbook(report).active["A4"].value == "T009"
    assert errors.read_text(encoding="utf-8-sig").splitlines()[1:] == ['"not-a-workbook.xlsx","","no-worksheet"']

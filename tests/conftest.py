"""Pytest configuration for local package import resolution and workbook fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from openpyxl import Workbook

PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    # Ensure tests can import `stock_matrix` without package installation.
    sys.path.insert(0, project_root_str)


ERP_HEADERS = [
    "ลำดับ",
    "SKU",
    "ชื่อสินค้า",
    "หมวดหมู่",
    "หน่วย",
    "คลัง",
    "ต้นทุน",
    "ราคาขาย",
    "สต็อกพร้อมขาย",
]


@pytest.fixture
def make_workbook():
    """Build an in-memory workbook from a list of rows (first row at A1)."""

    def _make(rows: list[list[object]]) -> Workbook:
        workbook = Workbook()
        sheet = workbook.active
        for row in rows:
            sheet.append(row)
        return workbook

    return _make


@pytest.fixture
def erp_rows():
    """Build ERP-style rows with the code in column B and stock in column I."""

    def _rows(items: list[tuple[object, object]], *, headers: list[str] | None = None) -> list[list[object]]:
        rows: list[list[object]] = [list(ERP_HEADERS if headers is None else headers)]
        for index, (sku, quantity) in enumerate(items, start=1):
            rows.append([index, sku, "item", "cat", "pcs", "WH", 1, 2, quantity])
        return rows

    return _rows

"""Shared test fixtures for sheetchart tests.

Provides config fixtures, a small sales grid matching the sample data used
throughout the tests, and session-scoped .xlsx byte generators built with
openpyxl.
"""

from __future__ import annotations

import io

import openpyxl
import pytest

from sheetchart.config import SheetChartConfig
from sheetchart.models import Grid


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_config() -> SheetChartConfig:
    """Return a SheetChartConfig with all defaults."""
    return SheetChartConfig()


@pytest.fixture()
def test_config() -> SheetChartConfig:
    """``SheetChartConfig`` pre-set with test-friendly values."""
    return SheetChartConfig(log_sample_data=True, preview_limit=3)


# ---------------------------------------------------------------------------
# Grid fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sales_grid() -> Grid:
    """Four months of sales and expenses."""
    return Grid(
        header=["Month", "Sales", "Expenses"],
        rows=[
            ["January", "1000", "500"],
            ["February", "1500", "600"],
            ["March", "1200", "550"],
            ["April", "1800", "700"],
        ],
    )


@pytest.fixture()
def ragged_grid() -> Grid:
    """Rows shorter and longer than the header."""
    return Grid(
        header=["Label", "Value", "Note"],
        rows=[
            ["a", "1"],
            ["b"],
            ["c", "3", "ok", "extra"],
            [],
        ],
    )


# ---------------------------------------------------------------------------
# .xlsx byte generators
# ---------------------------------------------------------------------------


def workbook_bytes(wb: openpyxl.Workbook) -> bytes:
    buf = io.BytesIO()
    wb.save(buf)
    wb.close()
    return buf.getvalue()


@pytest.fixture(scope="session")
def sales_xlsx() -> bytes:
    """Single sheet: Month (text) / Sales (int) / Margin (float)."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Sales"
    ws.append(["Month", "Sales", "Margin"])
    ws.append(["January", 1000, 0.25])
    ws.append(["February", 1500, 0.3])
    ws.append(["March", 1200, 0.275])
    return workbook_bytes(wb)


@pytest.fixture(scope="session")
def multi_sheet_xlsx() -> bytes:
    """Empty first sheet, then two data sheets."""
    wb = openpyxl.Workbook()
    wb.active.title = "Cover"
    ws2 = wb.create_sheet("First")
    ws2.append(["Name", "Age"])
    ws2.append(["Alice", 30])
    ws3 = wb.create_sheet("Second")
    ws3.append(["Product", "Price"])
    ws3.append(["Widget", 9.99])
    return workbook_bytes(wb)


@pytest.fixture(scope="session")
def hidden_first_sheet_xlsx() -> bytes:
    wb = openpyxl.Workbook()
    ws1 = wb.active
    ws1.title = "Hidden"
    ws1.sheet_state = "hidden"
    ws1.append(["Secret", "Value"])
    ws1.append(["x", 1])
    ws2 = wb.create_sheet("Visible")
    ws2.append(["Name", "Score"])
    ws2.append(["Bob", 7])
    wb.active = 1
    return workbook_bytes(wb)


@pytest.fixture(scope="session")
def gapped_rows_xlsx() -> bytes:
    """Data rows on sheet rows 2, 4 and 5; row 3 is entirely empty."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Gaps"
    ws.append(["Month", "Sales"])
    ws.append(["January", 10])
    ws.append([])
    ws.append(["March", 30])
    ws.append(["April", 40])
    return workbook_bytes(wb)


@pytest.fixture(scope="session")
def empty_xlsx() -> bytes:
    wb = openpyxl.Workbook()
    wb.active.title = "Empty"
    return workbook_bytes(wb)

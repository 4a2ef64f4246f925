"""Tests for sheetchart data models and enumerations."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest
from pydantic import ValidationError

from sheetchart.errors import ErrorCode, ParseError
from sheetchart.models import (
    AxisSelection,
    ChartConfiguration,
    ChartKind,
    ColumnType,
    Grid,
    LoadStatus,
    ParseResult,
    PlotPoint,
    SheetFile,
    SheetState,
    cell_at,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TestEnums:
    def test_column_type_values(self) -> None:
        assert [t.value for t in ColumnType] == ["numeric", "text"]

    def test_chart_kind_values(self) -> None:
        assert [k.value for k in ChartKind] == ["bar", "line", "point", "area"]

    @pytest.mark.parametrize(
        ("kind", "label"),
        [
            (ChartKind.BAR, "Bar Chart"),
            (ChartKind.LINE, "Line Chart"),
            (ChartKind.POINT, "Point Chart"),
            (ChartKind.AREA, "Area Chart"),
        ],
    )
    def test_chart_kind_label(self, kind: ChartKind, label: str) -> None:
        assert kind.label == label

    def test_every_kind_has_description_and_image(self) -> None:
        for kind in ChartKind:
            assert kind.description
            assert kind.system_image.startswith("chart.")

    def test_load_status_values(self) -> None:
        assert {s.value for s in LoadStatus} == {"unloaded", "loaded", "failed"}


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------


class TestGrid:
    def test_defaults_are_empty(self) -> None:
        grid = Grid()
        assert grid.column_count == 0
        assert grid.row_count == 0
        assert not grid.has_column(0)

    def test_cell_access(self, ragged_grid: Grid) -> None:
        assert ragged_grid.cell(0, 0) == "a"
        assert ragged_grid.cell(1, 1) == ""
        assert ragged_grid.cell(3, 0) == ""

    def test_column_values(self, ragged_grid: Grid) -> None:
        assert ragged_grid.column_values(2) == ["", "", "ok", ""]

    def test_cells_beyond_header_not_a_column(self, ragged_grid: Grid) -> None:
        assert ragged_grid.column_count == 3
        assert not ragged_grid.has_column(3)

    def test_cell_at(self) -> None:
        assert cell_at(["a"], 0) == "a"
        assert cell_at(["a"], 1) == ""
        assert cell_at(["a"], -1) == ""

    def test_frozen(self, sales_grid: Grid) -> None:
        with pytest.raises(ValidationError):
            sales_grid.header = ["x"]  # type: ignore[misc]

    def test_contents_cannot_be_mutated(self, sales_grid: Grid) -> None:
        assert isinstance(sales_grid.rows, tuple)
        assert all(isinstance(row, tuple) for row in sales_grid.rows)
        with pytest.raises(AttributeError):
            sales_grid.rows.append(("May", "1", "1"))  # type: ignore[attr-defined]
        with pytest.raises(TypeError):
            sales_grid.rows[0][1] = "0"  # type: ignore[index]
        assert sales_grid.cell(0, 1) == "1000"

    def test_lists_are_copied_on_construction(self) -> None:
        header = ["a"]
        rows = [["1"]]
        grid = Grid(header=header, rows=rows)
        header.append("b")
        rows[0].append("2")
        assert grid.header == ("a",)
        assert grid.rows == (("1",),)


# ---------------------------------------------------------------------------
# Selection and points
# ---------------------------------------------------------------------------


class TestSelection:
    def test_default_chart_kind(self) -> None:
        assert AxisSelection(x_column=0, y_column=1).chart_kind == ChartKind.BAR

    def test_chart_kind_from_string(self) -> None:
        assert AxisSelection(x_column=0, y_column=1, chart_kind="area").chart_kind == ChartKind.AREA

    def test_unknown_chart_kind_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AxisSelection(x_column=0, y_column=1, chart_kind="pie")

    def test_plot_point_text_x_stays_string(self) -> None:
        point = PlotPoint(x="100", y=1.0, row_index=0)
        assert point.x == "100"
        assert point.x_type == ColumnType.TEXT


# ---------------------------------------------------------------------------
# SheetFile / SheetState / ParseResult
# ---------------------------------------------------------------------------


class TestSheetState:
    def test_constructors(self, sales_grid: Grid) -> None:
        assert SheetState.unloaded().status == LoadStatus.UNLOADED
        loaded = SheetState.loaded(sales_grid)
        assert loaded.status == LoadStatus.LOADED
        assert loaded.grid == sales_grid
        error = ParseError(code=ErrorCode.E_PARSE_NO_WORKSHEET, message="none")
        failed = SheetState.failed(error)
        assert failed.status == LoadStatus.FAILED
        assert failed.grid is None
        assert failed.error == error

    def test_sheet_file_data_only_when_loaded(self, sales_grid: Grid) -> None:
        sheet = SheetFile(title="s")
        assert sheet.data is None
        assert not sheet.is_loaded
        sheet = sheet.model_copy(update={"state": SheetState.loaded(sales_grid)})
        assert sheet.data == sales_grid
        assert sheet.is_loaded

    def test_parse_result_ok(self) -> None:
        assert ParseResult(grid=Grid()).ok
        assert not ParseResult(
            error=ParseError(code=ErrorCode.E_PARSE_UNREADABLE_SOURCE, message="x")
        ).ok


# ---------------------------------------------------------------------------
# ChartConfiguration
# ---------------------------------------------------------------------------


class TestChartConfiguration:
    def test_defaults(self) -> None:
        config = ChartConfiguration(name="c", x_axis_column=0, y_axis_column=1)
        assert config.chart_type == "bar"
        assert config.chart_color == "#007AFF"
        assert config.show_legend is True
        assert config.show_grid_lines is True
        assert config.excluded_row_indices is None
        assert isinstance(config.date_created, datetime)
        assert config.date_created.tzinfo is not None

    def test_from_selection(self) -> None:
        selection = AxisSelection(x_column=0, y_column=2, chart_kind=ChartKind.LINE)
        config = ChartConfiguration.from_selection(
            "Expenses", selection, frozenset({3, 1}), chart_color="#FF9500"
        )
        assert config.chart_type == "line"
        assert config.x_axis_column == 0
        assert config.y_axis_column == 2
        assert config.excluded_row_indices == [1, 3]
        assert config.chart_color == "#FF9500"

    def test_empty_exclusions_stored_as_none(self) -> None:
        config = ChartConfiguration.from_selection("c", AxisSelection(x_column=0, y_column=1))
        assert config.excluded_row_indices is None
        assert config.to_exclusions() == frozenset()

    def test_round_trip_to_selection(self) -> None:
        selection = AxisSelection(x_column=1, y_column=2, chart_kind=ChartKind.AREA)
        config = ChartConfiguration.from_selection("c", selection, {0})
        assert config.to_selection() == selection
        assert config.to_exclusions() == frozenset({0})

    def test_unknown_chart_type_reads_as_bar(self) -> None:
        config = ChartConfiguration(
            name="c", chart_type="donut", x_axis_column=0, y_axis_column=1
        )
        assert config.chart_kind == ChartKind.BAR
        assert config.to_selection().chart_kind == ChartKind.BAR

    def test_json_round_trip(self) -> None:
        config = ChartConfiguration.from_selection(
            "c", AxisSelection(x_column=0, y_column=1), {2}, x_axis_label="Month"
        )
        restored = ChartConfiguration.model_validate_json(config.model_dump_json())
        assert restored == config

    def test_from_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "chart.json"
        path.write_text(
            json.dumps(
                {
                    "name": "Sales",
                    "chart_type": "point",
                    "x_axis_column": 0,
                    "y_axis_column": 1,
                    "excluded_row_indices": [2],
                }
            ),
            encoding="utf-8",
        )
        config = ChartConfiguration.from_file(str(path))
        assert config.chart_kind == ChartKind.POINT
        assert config.to_exclusions() == frozenset({2})

    def test_from_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "chart.yaml"
        path.write_text(
            "name: Sales\nx_axis_column: 0\ny_axis_column: 1\nshow_legend: false\n",
            encoding="utf-8",
        )
        config = ChartConfiguration.from_file(str(path))
        assert config.show_legend is False
        assert config.chart_kind == ChartKind.BAR

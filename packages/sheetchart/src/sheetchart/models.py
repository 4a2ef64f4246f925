"""Pydantic data models and enumerations for sheetchart.

This module defines the data model layer shared by every pipeline stage:
the ingested ``Grid``, the tagged ``SheetState`` of an imported file, the
axis selection and plot-point value objects, the stage result artifacts, and
the ``ChartConfiguration`` record shape consumed by persistence layers.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from sheetchart.config import _load_mapping
from sheetchart.errors import ParseError, SelectionError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ColumnType(str, Enum):
    """Semantic type of a grid column, derived on demand and never stored."""

    NUMERIC = "numeric"
    TEXT = "text"


class ChartKind(str, Enum):
    """Chart style chosen for an axis selection."""

    BAR = "bar"
    LINE = "line"
    POINT = "point"
    AREA = "area"

    @property
    def label(self) -> str:
        return f"{self.value.capitalize()} Chart"

    @property
    def description(self) -> str:
        return _CHART_KIND_DESCRIPTIONS[self]

    @property
    def system_image(self) -> str:
        """Icon name shown next to the kind in chart-type pickers."""
        return _CHART_KIND_IMAGES[self]


_CHART_KIND_DESCRIPTIONS: dict[ChartKind, str] = {
    ChartKind.BAR: "Compare values across categories",
    ChartKind.LINE: "Show trends over a sequence",
    ChartKind.POINT: "Plot individual values as points",
    ChartKind.AREA: "Show volume beneath a trend line",
}

_CHART_KIND_IMAGES: dict[ChartKind, str] = {
    ChartKind.BAR: "chart.bar.fill",
    ChartKind.LINE: "chart.line.uptrend.xyaxis",
    ChartKind.POINT: "chart.dots.scatter",
    ChartKind.AREA: "chart.line.uptrend.xyaxis.circle.fill",
}


class LoadStatus(str, Enum):
    """Import lifecycle of a ``SheetFile``."""

    UNLOADED = "unloaded"
    LOADED = "loaded"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Core Models
# ---------------------------------------------------------------------------


class Grid(BaseModel):
    """Header row plus data rows of a parsed tabular source.

    Rows may be ragged.  Index-based access through :meth:`cell` treats
    missing trailing cells as ``""`` and ignores cells beyond the header.
    Header and rows are stored as tuples, so a grid cannot change after
    construction; lists passed in are converted.
    """

    model_config = ConfigDict(frozen=True)

    header: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()

    @property
    def column_count(self) -> int:
        return len(self.header)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def has_column(self, column_index: int) -> bool:
        return 0 <= column_index < len(self.header)

    def cell(self, row_index: int, column_index: int) -> str:
        """Return the cell at (*row_index*, *column_index*), ``""`` when missing."""
        return cell_at(self.rows[row_index], column_index)

    def column_values(self, column_index: int) -> list[str]:
        """All cells of a column in row order, missing cells as ``""``."""
        return [cell_at(row, column_index) for row in self.rows]


def cell_at(row: Sequence[str], column_index: int) -> str:
    """Return ``row[column_index]`` or ``""`` when the row is too short."""
    if 0 <= column_index < len(row):
        return row[column_index]
    return ""


class AxisSelection(BaseModel):
    """Columns (by index) and chart kind chosen for a chart."""

    model_config = ConfigDict(frozen=True)

    x_column: int
    y_column: int
    chart_kind: ChartKind = ChartKind.BAR


class IndexedRow(BaseModel):
    """A data row tagged with its 0-based position in ``Grid.rows``."""

    model_config = ConfigDict(frozen=True)

    index: int
    row: tuple[str, ...]


class PlotPoint(BaseModel):
    """One (x, y) pair destined for rendering.

    ``x_type`` states how ``x`` must be treated: a category label when
    ``text``, an ordinate when ``numeric`` (in which case ``x`` is a float).
    """

    model_config = ConfigDict(frozen=True)

    x: str | float
    y: float
    x_type: ColumnType = ColumnType.TEXT
    row_index: int


class SheetState(BaseModel):
    """Tagged import state: unloaded, loaded with a grid, or failed with an error."""

    model_config = ConfigDict(frozen=True)

    status: LoadStatus = LoadStatus.UNLOADED
    grid: Grid | None = None
    error: ParseError | None = None

    @classmethod
    def unloaded(cls) -> SheetState:
        return cls()

    @classmethod
    def loaded(cls, grid: Grid) -> SheetState:
        return cls(status=LoadStatus.LOADED, grid=grid)

    @classmethod
    def failed(cls, error: ParseError) -> SheetState:
        return cls(status=LoadStatus.FAILED, error=error)


class SheetFile(BaseModel):
    """An imported file: identity, display title, and import state."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str
    source_format: str | None = None
    state: SheetState = SheetState()

    @property
    def data(self) -> Grid | None:
        """The grid when loaded, otherwise ``None``."""
        return self.state.grid if self.state.status == LoadStatus.LOADED else None

    @property
    def is_loaded(self) -> bool:
        return self.state.status == LoadStatus.LOADED


# ---------------------------------------------------------------------------
# Stage Artifacts
# ---------------------------------------------------------------------------


class ParseResult(BaseModel):
    """Typed output of the parsing stage.

    Exactly one of ``grid`` and ``error`` is set.  ``warnings`` collects
    non-fatal events such as parser fallback or skipped sheets.
    """

    grid: Grid | None = None
    error: ParseError | None = None
    warnings: list[ParseError] = []
    source_format: str | None = None
    sheet_name: str | None = None
    parse_duration_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.grid is not None and self.error is None


class ValidationResult(BaseModel):
    """Outcome of validating an axis selection against a grid."""

    valid: bool
    error: SelectionError | None = None
    warnings: list[SelectionError] = []


class ChartPreparation(BaseModel):
    """Everything a renderer needs for one chart, produced by the router."""

    validation: ValidationResult
    points: list[PlotPoint] = []
    x_column_type: ColumnType | None = None
    y_column_type: ColumnType | None = None
    x_axis_label: str = "X"
    y_axis_label: str = "Y"
    selected_count: int = 0
    excluded_count: int = 0


# ---------------------------------------------------------------------------
# Persisted record shape
# ---------------------------------------------------------------------------


class ChartConfiguration(BaseModel):
    """Durable chart record: axis selection, styling, and exclusion snapshot.

    The chart type is stored as a plain string so records written by other
    versions still load; unknown values read back as ``ChartKind.BAR``.
    Excluded row indices are 0-based offsets into ``Grid.rows``, which skips
    blank lines and empty worksheet rows.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    chart_type: str = ChartKind.BAR.value
    x_axis_column: int
    y_axis_column: int
    date_created: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Styling
    chart_color: str = "#007AFF"
    show_legend: bool = True
    show_grid_lines: bool = True
    x_axis_label: str | None = None
    y_axis_label: str | None = None

    # Filtering
    excluded_row_indices: list[int] | None = None
    included_columns: list[int] | None = None

    sheet_file_id: str | None = None

    @property
    def chart_kind(self) -> ChartKind:
        try:
            return ChartKind(self.chart_type)
        except ValueError:
            return ChartKind.BAR

    @classmethod
    def from_selection(
        cls,
        name: str,
        selection: AxisSelection,
        exclusions: frozenset[int] | set[int] = frozenset(),
        **styling: object,
    ) -> ChartConfiguration:
        """Build a record from a validated selection and an exclusion set."""
        return cls(
            name=name,
            chart_type=selection.chart_kind.value,
            x_axis_column=selection.x_column,
            y_axis_column=selection.y_column,
            excluded_row_indices=sorted(exclusions) if exclusions else None,
            **styling,
        )

    def to_selection(self) -> AxisSelection:
        return AxisSelection(
            x_column=self.x_axis_column,
            y_column=self.y_axis_column,
            chart_kind=self.chart_kind,
        )

    def to_exclusions(self) -> frozenset[int]:
        return frozenset(self.excluded_row_indices or ())

    @classmethod
    def from_file(cls, path: str) -> ChartConfiguration:
        """Load a record from a YAML or JSON file (format chosen by extension)."""
        return cls(**_load_mapping(path))

"""sheetchart -- tabular ingestion and chart-data preparation.

Public API exports for models, enums, errors, configuration, and the
pipeline components.
"""

from sheetchart.analyzer import ColumnAnalyzer, parse_number
from sheetchart.chart_data import ChartDataBuilder
from sheetchart.config import SheetChartConfig
from sheetchart.errors import ErrorCode, ParseError, SelectionError, SheetChartError
from sheetchart.filtering import (
    exclude_all,
    filter_rows,
    include_all,
    prune_exclusions,
    selected_count,
    toggle_row,
)
from sheetchart.models import (
    AxisSelection,
    ChartConfiguration,
    ChartKind,
    ChartPreparation,
    ColumnType,
    Grid,
    IndexedRow,
    LoadStatus,
    ParseResult,
    PlotPoint,
    SheetFile,
    SheetState,
    ValidationResult,
)
from sheetchart.parser import TabularParser
from sheetchart.router import SheetChartRouter
from sheetchart.session import SheetRegistry, title_from_filename
from sheetchart.validator import SelectionValidator

__all__ = [
    # Enums
    "ColumnType",
    "ChartKind",
    "LoadStatus",
    # Core models
    "Grid",
    "SheetFile",
    "SheetState",
    "AxisSelection",
    "IndexedRow",
    "PlotPoint",
    "ChartConfiguration",
    # Stage artifacts
    "ParseResult",
    "ValidationResult",
    "ChartPreparation",
    # Pipeline
    "TabularParser",
    "ColumnAnalyzer",
    "parse_number",
    "SelectionValidator",
    "ChartDataBuilder",
    "SheetChartRouter",
    "SheetRegistry",
    "title_from_filename",
    # Row filtering
    "filter_rows",
    "prune_exclusions",
    "selected_count",
    "toggle_row",
    "exclude_all",
    "include_all",
    # Errors
    "ErrorCode",
    "SheetChartError",
    "ParseError",
    "SelectionError",
    # Config
    "SheetChartConfig",
]

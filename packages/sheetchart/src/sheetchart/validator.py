"""Axis-selection validator.

Rules are checked in order and the first failure wins:

1. both columns exist (``E_VALIDATE_COLUMN_OUT_OF_RANGE``);
2. at least one data row survives the exclusion set (``E_VALIDATE_NO_DATA``);
3. the y column is numeric (``E_VALIDATE_Y_AXIS_NOT_NUMERIC``).

Plotting a column against itself is valid but reported as a
``W_SAME_COLUMN_BOTH_AXES`` warning.  The x column has no type constraint.
"""

from __future__ import annotations

import logging
from collections.abc import Set

from sheetchart.analyzer import ColumnAnalyzer
from sheetchart.config import SheetChartConfig
from sheetchart.errors import ErrorCode, SelectionError
from sheetchart.filtering import selected_count
from sheetchart.models import AxisSelection, Grid, ValidationResult

logger = logging.getLogger("sheetchart")


class SelectionValidator:
    """Validates an :class:`AxisSelection` against a :class:`Grid`.

    Holds no state between calls; the result depends only on the grid,
    the selection and the exclusion set.
    """

    def __init__(
        self,
        config: SheetChartConfig | None = None,
        analyzer: ColumnAnalyzer | None = None,
    ) -> None:
        self._config = config or SheetChartConfig()
        self._analyzer = analyzer or ColumnAnalyzer(self._config)

    def validate(
        self,
        grid: Grid,
        selection: AxisSelection,
        exclusions: Set[int] = frozenset(),
    ) -> ValidationResult:
        for axis, column in (("X", selection.x_column), ("Y", selection.y_column)):
            if not grid.has_column(column):
                return _invalid(
                    ErrorCode.E_VALIDATE_COLUMN_OUT_OF_RANGE,
                    f"{axis}-axis column {column} does not exist; "
                    f"the sheet has {grid.column_count} column(s).",
                    column,
                )

        if selected_count(grid, exclusions) == 0:
            message = (
                "All rows are excluded. Select at least one row to chart."
                if grid.row_count
                else "The sheet has no data rows to chart."
            )
            return _invalid(ErrorCode.E_VALIDATE_NO_DATA, message)

        if not self._analyzer.is_valid_for_y_axis(grid, selection.y_column):
            name = grid.header[selection.y_column]
            return _invalid(
                ErrorCode.E_VALIDATE_Y_AXIS_NOT_NUMERIC,
                f"Y-axis column '{name}' must contain numeric values. "
                "Choose a column of numbers.",
                selection.y_column,
            )

        warnings: list[SelectionError] = []
        if selection.x_column == selection.y_column:
            warnings.append(
                SelectionError(
                    code=ErrorCode.W_SAME_COLUMN_BOTH_AXES,
                    message="The same column is used for both axes.",
                    column_index=selection.x_column,
                )
            )

        return ValidationResult(valid=True, warnings=warnings)


def _invalid(
    code: ErrorCode, message: str, column_index: int | None = None
) -> ValidationResult:
    logger.debug("Selection invalid (%s): %s", code.value, message)
    return ValidationResult(
        valid=False,
        error=SelectionError(code=code, message=message, column_index=column_index),
    )

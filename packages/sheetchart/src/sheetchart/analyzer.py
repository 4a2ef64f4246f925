"""Rule-based column analyzer for parsed grids.

Classifies each column as ``numeric`` or ``text`` and produces the
human-readable type descriptions and bounded previews shown while an axis
selection is being configured.

Numbers follow a locale-invariant grammar: an optional sign, digits, and at
most one decimal point.  Thousands separators, exponents, ``inf`` and
``nan`` are not numbers.
"""

from __future__ import annotations

import logging
import math
import re

from sheetchart.config import SheetChartConfig
from sheetchart.models import ColumnType, Grid

logger = logging.getLogger("sheetchart")

_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)")


def parse_number(value: str) -> float | None:
    """Parse *value* as a finite real number, or return ``None``.

    Surrounding whitespace is ignored.  Accepts ``"1"``, ``"-2.5"``,
    ``"+.5"`` and ``"3."``; rejects ``""``, ``"1,000"``, ``"1e3"``,
    ``"n/a"``.
    """
    text = value.strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def is_empty_cell(value: str) -> bool:
    return not value.strip()


class ColumnAnalyzer:
    """Derives column semantics from a :class:`Grid` without mutating it."""

    def __init__(self, config: SheetChartConfig | None = None) -> None:
        self._config = config or SheetChartConfig()

    # -- public API ----------------------------------------------------------

    def column_type(self, grid: Grid, column_index: int) -> ColumnType:
        """Classify one column.

        A column is numeric iff it has at least one non-empty cell and every
        non-empty cell parses with :func:`parse_number`.  All-empty and
        out-of-range columns are text.
        """
        if not grid.has_column(column_index):
            return ColumnType.TEXT

        seen_value = False
        for value in grid.column_values(column_index):
            if is_empty_cell(value):
                continue
            if parse_number(value) is None:
                return ColumnType.TEXT
            seen_value = True

        return ColumnType.NUMERIC if seen_value else ColumnType.TEXT

    def column_types(self, grid: Grid) -> list[ColumnType]:
        return [self.column_type(grid, i) for i in range(grid.column_count)]

    def is_valid_for_y_axis(self, grid: Grid, column_index: int) -> bool:
        return self.column_type(grid, column_index) == ColumnType.NUMERIC

    def type_description(self, grid: Grid, column_index: int) -> str:
        """Short label for a column picker: ``Numeric``, ``Text`` or ``Text (empty)``."""
        if self.column_type(grid, column_index) == ColumnType.NUMERIC:
            return "Numeric"
        if grid.has_column(column_index) and any(
            not is_empty_cell(v) for v in grid.column_values(column_index)
        ):
            return "Text"
        return "Text (empty)"

    def preview(
        self, grid: Grid, column_index: int, limit: int | None = None
    ) -> list[str]:
        """Return up to *limit* cells of a column, starting at the first data row.

        Previews always show raw ingested content; exclusion sets do not
        apply.  *limit* defaults to ``config.preview_limit``.
        """
        if limit is None:
            limit = self._config.preview_limit
        if limit <= 0 or not grid.has_column(column_index):
            return []
        values = [grid.cell(i, column_index) for i in range(min(limit, grid.row_count))]
        if self._config.log_sample_data:
            logger.debug(
                "Preview of column %d (%s): %s",
                column_index,
                grid.header[column_index],
                values,
            )
        return values

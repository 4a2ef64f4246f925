"""Plot-point builder.

Turns filtered rows and a validated selection into an ordered list of
:class:`PlotPoint`.  Rows whose y cell is not a number are dropped without
error: validation only guarantees the y column as a whole, not every cell.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sheetchart.analyzer import parse_number
from sheetchart.models import AxisSelection, ColumnType, IndexedRow, PlotPoint, cell_at

logger = logging.getLogger("sheetchart")


class ChartDataBuilder:
    """Builds plot points in row order, with no sorting or deduplication."""

    def build(
        self,
        rows: Iterable[IndexedRow],
        selection: AxisSelection,
        x_type: ColumnType = ColumnType.TEXT,
    ) -> list[PlotPoint]:
        """Return one point per row with a numeric y cell.

        Parameters
        ----------
        rows:
            Output of :func:`~sheetchart.filtering.filter_rows`.
        selection:
            The axis selection the rows were validated against.
        x_type:
            Type of the x column.  When numeric, ``x`` is exposed as a float
            and rows whose x cell is not a number are dropped as well.
        """
        points: list[PlotPoint] = []
        dropped_y = 0
        dropped_x = 0

        for item in rows:
            y = parse_number(cell_at(item.row, selection.y_column))
            if y is None:
                dropped_y += 1
                continue

            raw_x = cell_at(item.row, selection.x_column)
            x: str | float = raw_x
            if x_type == ColumnType.NUMERIC:
                number = parse_number(raw_x)
                if number is None:
                    dropped_x += 1
                    continue
                x = number

            points.append(PlotPoint(x=x, y=y, x_type=x_type, row_index=item.index))

        if dropped_y or dropped_x:
            logger.debug(
                "Dropped %d row(s) with a non-numeric y value and %d row(s) with a "
                "non-numeric x value on a numeric x axis; %d point(s) built",
                dropped_y,
                dropped_x,
                len(points),
            )
        return points

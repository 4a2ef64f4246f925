"""SheetChartRouter -- orchestrator and public API for the sheetchart pipeline.

Loading routes a file through:

1. Format check via :meth:`SheetChartRouter.can_handle`.
2. Parsing via :class:`TabularParser`.

Preparing a chart routes a grid through:

1. Selection validation via :class:`SelectionValidator`.
2. Row filtering via :func:`filter_rows`.
3. x-column classification via :class:`ColumnAnalyzer`.
4. Point building via :class:`ChartDataBuilder`.

The router is **fail-closed**: a failed parse returns a result with an
error and no grid; a failed validation returns no points.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Set
from pathlib import Path

from sheetchart.analyzer import ColumnAnalyzer
from sheetchart.chart_data import ChartDataBuilder
from sheetchart.config import SheetChartConfig
from sheetchart.filtering import filter_rows, prune_exclusions
from sheetchart.models import (
    AxisSelection,
    ChartPreparation,
    Grid,
    ParseResult,
)
from sheetchart.parser import SUPPORTED_FORMATS, TabularParser, normalize_format_hint
from sheetchart.validator import SelectionValidator

logger = logging.getLogger("sheetchart")


def format_hint_for(filename: str) -> str:
    """Extension of *filename* without the dot, lower-cased (``""`` if none)."""
    return normalize_format_hint(os.path.splitext(filename)[1])


class SheetChartRouter:
    """Top-level orchestrator for the sheetchart pipeline.

    Builds all internal components from the config, then exposes
    :meth:`can_handle`, :meth:`load`, :meth:`aload` and :meth:`prepare` as
    the public API.

    Parameters
    ----------
    config:
        Pipeline configuration.  Uses defaults when *None*.
    """

    def __init__(self, config: SheetChartConfig | None = None) -> None:
        self._config = config or SheetChartConfig()
        self._parser = TabularParser(self._config)
        self._analyzer = ColumnAnalyzer(self._config)
        self._validator = SelectionValidator(self._config, self._analyzer)
        self._builder = ChartDataBuilder()

    @property
    def analyzer(self) -> ColumnAnalyzer:
        return self._analyzer

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def can_handle(self, filename: str) -> bool:
        """Return True if *filename* ends with a supported extension (case-insensitive)."""
        return format_hint_for(filename) in SUPPORTED_FORMATS

    def load(self, raw: bytes, filename: str) -> ParseResult:
        """Parse *raw* using the extension of *filename* as the format hint."""
        result = self._parser.parse(raw, format_hint_for(filename))
        self._log_load(filename, result)
        return result

    def load_file(self, file_path: str | Path) -> ParseResult:
        result = self._parser.parse_file(file_path)
        self._log_load(os.path.basename(str(file_path)), result)
        return result

    async def aload(self, raw: bytes, filename: str) -> ParseResult:
        """Async wrapper around :meth:`load`.

        Offloads the synchronous ``load()`` call to a thread via
        ``asyncio.to_thread()``.
        """
        return await asyncio.to_thread(self.load, raw, filename)

    # ------------------------------------------------------------------
    # Chart preparation
    # ------------------------------------------------------------------

    def prepare(
        self,
        grid: Grid,
        selection: AxisSelection,
        exclusions: Set[int] = frozenset(),
    ) -> ChartPreparation:
        """Validate *selection* and build its plot points.

        Exclusion indices that no longer address a row are ignored.
        """
        excluded = prune_exclusions(grid, exclusions)
        validation = self._validator.validate(grid, selection, excluded)
        selected = grid.row_count - len(excluded)

        if not validation.valid:
            return ChartPreparation(
                validation=validation,
                selected_count=selected,
                excluded_count=len(excluded),
            )

        x_type = self._analyzer.column_type(grid, selection.x_column)
        y_type = self._analyzer.column_type(grid, selection.y_column)
        points = self._builder.build(filter_rows(grid, excluded), selection, x_type)

        logger.debug(
            "Prepared %s chart: %d point(s) from %d selected row(s)",
            selection.chart_kind.value,
            len(points),
            selected,
        )

        return ChartPreparation(
            validation=validation,
            points=points,
            x_column_type=x_type,
            y_column_type=y_type,
            x_axis_label=grid.header[selection.x_column],
            y_axis_label=grid.header[selection.y_column],
            selected_count=selected,
            excluded_count=len(excluded),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _log_load(self, filename: str, result: ParseResult) -> None:
        if result.error is not None:
            logger.error(
                "sheetchart | file=%s | code=%s | detail=%s",
                filename,
                result.error.code.value,
                result.error.message,
            )
            return
        assert result.grid is not None
        logger.info(
            "sheetchart | file=%s | format=%s | sheet=%s | columns=%d | rows=%d | "
            "warnings=%d | time=%.3fs",
            filename,
            result.source_format,
            result.sheet_name or "-",
            result.grid.column_count,
            result.grid.row_count,
            len(result.warnings),
            result.parse_duration_seconds,
        )

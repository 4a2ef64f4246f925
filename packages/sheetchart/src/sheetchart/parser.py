"""Tabular parser: raw file bytes to a format-agnostic :class:`Grid`.

Three source formats are accepted, chosen by the caller's format hint (the
file extension) and never by sniffing content:

1. **csv** -- decoded text split on universal newlines and commas.
2. **xlsx** -- written to a scoped temporary directory and read with
   **openpyxl** (shared strings resolved, cached values only).  When openpyxl
   cannot open the archive the **pandas** ``read_excel`` fallback is tried and
   a ``W_PARSER_FALLBACK`` warning recorded.
3. **xls** -- legacy workbooks read in memory with **xlrd**.

Only the first resolvable worksheet of a workbook feeds the grid.  Failures
are returned as a :class:`~sheetchart.errors.ParseError` inside the
:class:`~sheetchart.models.ParseResult`; a failed parse never carries a grid.
"""

from __future__ import annotations

import asyncio
import csv
import datetime as dt
import io
import logging
import tempfile
import time
from collections.abc import Iterable
from decimal import Decimal
from pathlib import Path

import openpyxl
from openpyxl.chartsheet import Chartsheet
import pandas as pd
import xlrd

from sheetchart.config import SheetChartConfig
from sheetchart.errors import ErrorCode, ParseError
from sheetchart.models import Grid, ParseResult

logger = logging.getLogger("sheetchart")

DELIMITER = ","
SUPPORTED_FORMATS = ("csv", "xlsx", "xls")


def normalize_format_hint(format_hint: str) -> str:
    """``".XLSX"`` -> ``"xlsx"``."""
    return format_hint.strip().lower().lstrip(".")


def trim_row(cells: list[str]) -> list[str]:
    """Drop trailing empty cells."""
    end = len(cells)
    while end and not cells[end - 1].strip():
        end -= 1
    return cells[:end]


class TabularParser:
    """Converts csv, xlsx and xls payloads into a :class:`Grid`.

    Parameters
    ----------
    config:
        Pipeline configuration (text encoding, pandas fallback, hidden-sheet
        policy, date format).  Uses defaults when *None*.
    """

    def __init__(self, config: SheetChartConfig | None = None) -> None:
        self._config = config or SheetChartConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, raw: bytes, format_hint: str) -> ParseResult:
        """Parse *raw* according to *format_hint*.

        Parameters
        ----------
        raw:
            The complete file contents.
        format_hint:
            The file extension, with or without the leading dot.

        Returns
        -------
        ParseResult
            A result holding either the grid or a typed error, plus any
            non-fatal warnings.
        """
        start = time.monotonic()
        source_format = normalize_format_hint(format_hint)

        if source_format == "csv":
            result = self._parse_delimited(raw)
        elif source_format == "xlsx":
            result = self._parse_xlsx(raw)
        elif source_format == "xls":
            result = self._parse_xls(raw)
        else:
            result = _failure(
                ErrorCode.E_PARSE_UNSUPPORTED_FORMAT,
                f"Unsupported file format '{format_hint}'. "
                f"Expected one of: {', '.join(SUPPORTED_FORMATS)}.",
            )

        duration = time.monotonic() - start
        if result.error is not None:
            logger.error(
                "Parse failed (%s): %s (%.3fs)",
                result.error.code.value,
                result.error.message,
                duration,
            )
        else:
            assert result.grid is not None
            logger.info(
                "Parsed %s source: %d columns, %d rows in %.3fs",
                source_format,
                result.grid.column_count,
                result.grid.row_count,
                duration,
            )

        return result.model_copy(
            update={
                "source_format": source_format,
                "parse_duration_seconds": duration,
            }
        )

    def parse_file(self, file_path: str | Path) -> ParseResult:
        """Read *file_path* and parse it, using its extension as the format hint.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        return self.parse(path.read_bytes(), path.suffix)

    async def aparse(self, raw: bytes, format_hint: str) -> ParseResult:
        """Async wrapper around :meth:`parse`.

        Offloads the synchronous ``parse()`` call to a thread via
        ``asyncio.to_thread()``.
        """
        return await asyncio.to_thread(self.parse, raw, format_hint)

    # ------------------------------------------------------------------
    # Delimited text
    # ------------------------------------------------------------------

    def _parse_delimited(self, raw: bytes) -> ParseResult:
        try:
            text = raw.decode(self._config.text_encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            return _failure(
                ErrorCode.E_PARSE_UNREADABLE_SOURCE,
                f"Could not decode text as {self._config.text_encoding}: {exc}",
            )

        # Only \r\n, \r and \n end a record; other Unicode line breaks stay in the cell.
        reader = csv.reader(io.StringIO(text, newline=""), delimiter=DELIMITER)
        try:
            records = [record for record in reader if not _is_blank_record(record)]
        except csv.Error as exc:
            return _failure(
                ErrorCode.E_PARSE_UNREADABLE_SOURCE,
                f"Malformed delimited text: {exc}",
            )

        if not records:
            return ParseResult(grid=Grid())
        return ParseResult(grid=Grid(header=records[0], rows=records[1:]))

    # ------------------------------------------------------------------
    # xlsx: openpyxl primary, pandas fallback
    # ------------------------------------------------------------------

    def _parse_xlsx(self, raw: bytes) -> ParseResult:
        # The temporary copy is removed on every exit path, errors included.
        with tempfile.TemporaryDirectory(prefix="sheetchart_") as tmp_dir:
            path = Path(tmp_dir) / "source.xlsx"
            path.write_bytes(raw)
            return self._parse_xlsx_path(path)

    def _parse_xlsx_path(self, path: Path) -> ParseResult:
        try:
            wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
        except Exception as exc:
            logger.warning("openpyxl could not open workbook: %s", exc)
            if self._config.enable_pandas_fallback:
                fallback = self._try_parse_xlsx_pandas(path, reason=str(exc))
                if fallback is not None:
                    return fallback
            return _failure(
                ErrorCode.E_PARSE_UNREADABLE_SOURCE,
                f"Could not open workbook: {exc}",
            )

        warnings: list[ParseError] = []
        try:
            sheets: list[tuple[str, Iterable[list[str]]]] = []
            for sheet_name in wb.sheetnames:
                ws = wb[sheet_name]
                if isinstance(ws, Chartsheet):
                    warnings.append(
                        _warning(
                            ErrorCode.W_SHEET_SKIPPED_CHART,
                            f"Sheet '{sheet_name}' is chart-only; skipped.",
                            sheet_name,
                        )
                    )
                    logger.info("Skipped chart-only sheet '%s'", sheet_name)
                    continue
                if self._config.skip_hidden_sheets and ws.sheet_state != "visible":
                    warnings.append(
                        _warning(
                            ErrorCode.W_SHEET_SKIPPED_HIDDEN,
                            f"Sheet '{sheet_name}' is hidden; skipped.",
                            sheet_name,
                        )
                    )
                    logger.info("Skipped hidden sheet '%s'", sheet_name)
                    continue
                rows = (
                    [self._format_value(v) for v in values]
                    for values in ws.iter_rows(values_only=True)
                )
                sheets.append((sheet_name, rows))

            return self._first_resolvable(sheets, warnings)
        finally:
            wb.close()

    def _try_parse_xlsx_pandas(self, path: Path, reason: str) -> ParseResult | None:
        """Attempt the pandas fallback; ``None`` when it fails too."""
        try:
            frames = pd.read_excel(
                path, sheet_name=None, header=None, dtype=object, na_filter=False
            )
        except Exception:
            logger.debug("pandas fallback failed", exc_info=True)
            return None

        warnings = [
            _warning(
                ErrorCode.W_PARSER_FALLBACK,
                f"Workbook parsed via pandas fallback. Reason: {reason}",
            )
        ]
        logger.warning("Workbook parsed via pandas fallback")

        sheets: list[tuple[str, Iterable[list[str]]]] = []
        for sheet_name, df in frames.items():
            rows = (
                ["" if pd.isna(v) else self._format_value(v) for v in values]
                for values in df.itertuples(index=False, name=None)
            )
            sheets.append((str(sheet_name), rows))
        return self._first_resolvable(sheets, warnings)

    # ------------------------------------------------------------------
    # xls: xlrd
    # ------------------------------------------------------------------

    def _parse_xls(self, raw: bytes) -> ParseResult:
        try:
            book = xlrd.open_workbook(file_contents=raw, on_demand=True)
        except Exception as exc:
            return _failure(
                ErrorCode.E_PARSE_UNREADABLE_SOURCE,
                f"Could not open .xls workbook: {exc}",
            )

        warnings: list[ParseError] = []
        try:
            sheets: list[tuple[str, Iterable[list[str]]]] = []
            for sheet in book.sheets():
                if self._config.skip_hidden_sheets and getattr(sheet, "visibility", 0):
                    warnings.append(
                        _warning(
                            ErrorCode.W_SHEET_SKIPPED_HIDDEN,
                            f"Sheet '{sheet.name}' is hidden; skipped.",
                            sheet.name,
                        )
                    )
                    continue
                sheets.append((sheet.name, self._iter_xls_rows(sheet, book.datemode)))
            return self._first_resolvable(sheets, warnings)
        finally:
            book.release_resources()

    def _iter_xls_rows(self, sheet, datemode: int) -> Iterable[list[str]]:
        for row_idx in range(sheet.nrows):
            yield [
                self._format_xls_cell(sheet.cell(row_idx, col_idx), datemode)
                for col_idx in range(sheet.ncols)
            ]

    def _format_xls_cell(self, cell, datemode: int) -> str:
        if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
            return ""
        if cell.ctype == xlrd.XL_CELL_DATE:
            try:
                return xlrd.xldate_as_datetime(cell.value, datemode).strftime(
                    self._config.date_format
                )
            except Exception as exc:
                logger.warning("Date conversion failed: %s; falling back to str", exc)
                return str(cell.value)
        if cell.ctype == xlrd.XL_CELL_BOOLEAN:
            return "TRUE" if cell.value else "FALSE"
        if cell.ctype == xlrd.XL_CELL_ERROR:
            return "#ERROR"
        return self._format_value(cell.value)

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _first_resolvable(
        self,
        sheets: list[tuple[str, Iterable[list[str]]]],
        warnings: list[ParseError],
    ) -> ParseResult:
        """Build the grid from the first worksheet that has any content.

        Empty worksheets are passed over with a warning.  When every
        worksheet is empty the grid is empty; when there is no worksheet at
        all the result is ``E_PARSE_NO_WORKSHEET``.

        Entirely empty rows are dropped wherever they occur, so ``Grid.rows``
        is compacted: row offsets, and any exclusion indices stored against
        them, count only non-empty rows and can differ from the sheet's own
        row numbers.
        """
        if not sheets:
            return _failure(
                ErrorCode.E_PARSE_NO_WORKSHEET,
                "Workbook contains no readable worksheet.",
                warnings=warnings,
            )

        for sheet_name, rows in sheets:
            records = [r for r in (trim_row(row) for row in rows) if r]
            if not records:
                warnings.append(
                    _warning(
                        ErrorCode.W_SHEET_SKIPPED_EMPTY,
                        f"Sheet '{sheet_name}' is empty; skipped.",
                        sheet_name,
                    )
                )
                logger.info("Skipped empty sheet '%s'", sheet_name)
                continue
            return ParseResult(
                grid=Grid(header=records[0], rows=records[1:]),
                warnings=warnings,
                sheet_name=sheet_name,
            )

        return ParseResult(grid=Grid(), warnings=warnings, sheet_name=sheets[0][0])

    def _format_value(self, value: object) -> str:
        """Render a workbook cell value as the string stored in the grid."""
        if value is None:
            return ""
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            if value.is_integer():
                return str(int(value))
            # Positional notation keeps the value inside the numeric grammar.
            return format(Decimal(repr(value)), "f")
        if isinstance(value, (dt.datetime, dt.date)):
            return value.strftime(self._config.date_format)
        if isinstance(value, dt.time):
            return value.isoformat()
        return str(value)


def _is_blank_record(record: list[str]) -> bool:
    """True for an empty or whitespace-only line."""
    return not record or (len(record) == 1 and not record[0].strip())


def _failure(
    code: ErrorCode,
    message: str,
    warnings: list[ParseError] | None = None,
) -> ParseResult:
    return ParseResult(
        error=ParseError(code=code, message=message, recoverable=False),
        warnings=warnings or [],
    )


def _warning(code: ErrorCode, message: str, sheet_name: str | None = None) -> ParseError:
    return ParseError(code=code, message=message, sheet_name=sheet_name, recoverable=True)

"""Normalized error codes and structured error models for the sheetchart pipeline.

``ErrorCode`` contains every error/warning code the pipeline can emit.
``SheetChartError`` is the base Pydantic model; ``ParseError`` and
``SelectionError`` extend it with the location field relevant to their stage
(``sheet_name`` for parsing, ``column_index`` for axis validation).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Normalized error codes for the sheetchart pipeline.

    Values equal their names so they are stable strings suitable for
    programmatic handling.  Codes prefixed with ``E_`` are errors; codes
    prefixed with ``W_`` are non-fatal warnings.
    """

    # Parse errors (fatal to the current import)
    E_PARSE_UNREADABLE_SOURCE = "E_PARSE_UNREADABLE_SOURCE"
    E_PARSE_NO_WORKSHEET = "E_PARSE_NO_WORKSHEET"
    E_PARSE_UNSUPPORTED_FORMAT = "E_PARSE_UNSUPPORTED_FORMAT"

    # Selection validation errors (recoverable, selection stays editable)
    E_VALIDATE_COLUMN_OUT_OF_RANGE = "E_VALIDATE_COLUMN_OUT_OF_RANGE"
    E_VALIDATE_Y_AXIS_NOT_NUMERIC = "E_VALIDATE_Y_AXIS_NOT_NUMERIC"
    E_VALIDATE_NO_DATA = "E_VALIDATE_NO_DATA"

    # Warnings (non-fatal)
    W_PARSER_FALLBACK = "W_PARSER_FALLBACK"
    W_SHEET_SKIPPED_CHART = "W_SHEET_SKIPPED_CHART"
    W_SHEET_SKIPPED_HIDDEN = "W_SHEET_SKIPPED_HIDDEN"
    W_SHEET_SKIPPED_EMPTY = "W_SHEET_SKIPPED_EMPTY"
    W_SAME_COLUMN_BOTH_AXES = "W_SAME_COLUMN_BOTH_AXES"


class SheetChartError(BaseModel):
    """Base structured error with code, message, and context.

    Stage-specific subclasses add a location field.
    """

    code: ErrorCode
    message: str
    stage: str | None = None
    recoverable: bool = False

    @property
    def is_warning(self) -> bool:
        return self.code.value.startswith("W_")


class ParseError(SheetChartError):
    """Import failure or warning, with the worksheet that produced it."""

    stage: str | None = "parse"
    sheet_name: str | None = None


class SelectionError(SheetChartError):
    """Axis-selection problem, with the offending column when known."""

    stage: str | None = "validate"
    recoverable: bool = True
    column_index: int | None = None

"""Owned registry of imported sheet files.

``SheetRegistry`` replaces a process-wide list of imported files: the
caller creates one per session and passes it where it is needed.

Every import of a sheet takes a request token from a monotonically
increasing counter.  A completion is applied only when its token is the
latest one issued for that sheet, so a slow parse that finishes after a
newer re-import started is discarded instead of overwriting the newer grid.
"""

from __future__ import annotations

import itertools
import logging
import os
from collections.abc import Iterator

from sheetchart.models import ParseResult, SheetFile, SheetState
from sheetchart.router import SheetChartRouter

logger = logging.getLogger("sheetchart")


def title_from_filename(filename: str) -> str:
    """``"reports/Sales Q1.xlsx"`` -> ``"Sales Q1"``."""
    return os.path.splitext(os.path.basename(filename))[0]


class SheetRegistry:
    """Collection of :class:`SheetFile` objects owned by one session."""

    def __init__(self, router: SheetChartRouter | None = None) -> None:
        self._router = router or SheetChartRouter()
        self._sheets: dict[str, SheetFile] = {}
        self._tokens = itertools.count(1)
        self._latest: dict[str, int] = {}

    # -- collection ----------------------------------------------------------

    def __iter__(self) -> Iterator[SheetFile]:
        return iter(list(self._sheets.values()))

    def __len__(self) -> int:
        return len(self._sheets)

    def __contains__(self, sheet_id: object) -> bool:
        return sheet_id in self._sheets

    def add(self, title: str) -> SheetFile:
        """Register an empty (unloaded) sheet."""
        sheet = SheetFile(title=title)
        self._sheets[sheet.id] = sheet
        return sheet

    def get(self, sheet_id: str) -> SheetFile:
        """Raises ``KeyError`` for unknown ids."""
        return self._sheets[sheet_id]

    def remove(self, sheet_id: str) -> None:
        self._sheets.pop(sheet_id, None)
        self._latest.pop(sheet_id, None)

    # -- import lifecycle ----------------------------------------------------

    def begin_import(self, sheet_id: str) -> int:
        """Issue a new request token for *sheet_id*, superseding earlier ones."""
        if sheet_id not in self._sheets:
            raise KeyError(sheet_id)
        token = next(self._tokens)
        self._latest[sheet_id] = token
        return token

    def complete_import(self, sheet_id: str, token: int, result: ParseResult) -> bool:
        """Apply *result* if *token* is still the latest request for the sheet.

        Returns ``True`` when applied, ``False`` when the result was stale or
        the sheet has been removed meanwhile.
        """
        if sheet_id not in self._sheets or self._latest.get(sheet_id) != token:
            logger.info(
                "Discarding stale import result for sheet %s (token %d)",
                sheet_id,
                token,
            )
            return False

        if result.error is not None:
            state = SheetState.failed(result.error)
        else:
            assert result.grid is not None
            state = SheetState.loaded(result.grid)

        sheet = self._sheets[sheet_id]
        self._sheets[sheet_id] = sheet.model_copy(
            update={"state": state, "source_format": result.source_format}
        )
        return True

    def import_bytes(self, raw: bytes, filename: str) -> SheetFile:
        """Register a sheet for *filename* and parse *raw* into it synchronously."""
        sheet = self.add(title_from_filename(filename))
        self.reimport_bytes(sheet.id, raw, filename)
        return self._sheets[sheet.id]

    def reimport_bytes(self, sheet_id: str, raw: bytes, filename: str) -> SheetFile:
        token = self.begin_import(sheet_id)
        self.complete_import(sheet_id, token, self._router.load(raw, filename))
        return self._sheets[sheet_id]

    async def aimport_bytes(self, raw: bytes, filename: str) -> SheetFile:
        """Async variant of :meth:`import_bytes`; parsing runs in a worker thread."""
        sheet = self.add(title_from_filename(filename))
        return await self.areimport_bytes(sheet.id, raw, filename)

    async def areimport_bytes(
        self, sheet_id: str, raw: bytes, filename: str
    ) -> SheetFile:
        """Re-parse into an existing sheet.

        The returned sheet reflects the newest applied import, which may
        belong to a later request.  Raises ``KeyError`` if the sheet was
        removed while parsing.
        """
        token = self.begin_import(sheet_id)
        result = await self._router.aload(raw, filename)
        self.complete_import(sheet_id, token, result)
        return self.get(sheet_id)

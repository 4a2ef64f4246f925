"""Row filtering and exclusion-set editing.

An exclusion set is a set of 0-based offsets into ``Grid.rows``; the header
is never excludable.  Indices outside the grid are ignored, so a set that
outlived a re-import with fewer rows is harmless.  Every function here
returns a new value and leaves its inputs untouched.
"""

from __future__ import annotations

from collections.abc import Set

from sheetchart.models import Grid, IndexedRow


def filter_rows(grid: Grid, exclusions: Set[int] = frozenset()) -> list[IndexedRow]:
    """Rows of *grid* in original order, index-tagged, minus *exclusions*."""
    return [
        IndexedRow(index=i, row=row)
        for i, row in enumerate(grid.rows)
        if i not in exclusions
    ]


def prune_exclusions(grid: Grid, exclusions: Set[int]) -> frozenset[int]:
    """Drop indices that no longer address a row of *grid*."""
    return frozenset(i for i in exclusions if 0 <= i < grid.row_count)


def selected_count(grid: Grid, exclusions: Set[int] = frozenset()) -> int:
    """Number of rows that survive *exclusions*."""
    return grid.row_count - len(prune_exclusions(grid, exclusions))


def toggle_row(exclusions: Set[int], index: int) -> frozenset[int]:
    if index in exclusions:
        return frozenset(exclusions - {index})
    return frozenset(exclusions | {index})


def exclude_all(grid: Grid) -> frozenset[int]:
    return frozenset(range(grid.row_count))


def include_all() -> frozenset[int]:
    return frozenset()

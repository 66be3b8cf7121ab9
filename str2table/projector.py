"""
Subtable selection and color attachment.

The subtable is the cross of the selected lines and columns. An axis with no
selection keeps all of its indices; indices past the end of the table are
dropped. Kept lines and columns are always in ascending order.

Colors are looked up by each cell's position in the full table, so a color
directive means the same cells whether or not a subtable is exported. Colors
only matter for console output; file writers ignore them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .cell_types import Cell
from .directives import ResolvedDirective, color_at
from .range_spec import Axis, ColorTag
from .table_builder import Table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColoredCell:
    cell: Cell
    color: ColorTag
    line: int    # position in the full table, 1-based
    column: int


@dataclass(frozen=True)
class ProjectedTable:
    rows: tuple[tuple[ColoredCell, ...], ...]
    lines: tuple[int, ...]
    columns: tuple[int, ...]

    @property
    def height(self) -> int:
        return len(self.lines)

    @property
    def width(self) -> int:
        return len(self.columns)

    def cells(self) -> list[list[Cell]]:
        return [[cc.cell for cc in row] for row in self.rows]

    def values(self) -> list[list]:
        return [[cc.cell.value for cc in row] for row in self.rows]

    def __iter__(self):
        return iter(self.rows)


def select_indices(requested: Iterable[int], available: int) -> list[int]:
    """Ascending, de-duplicated indices within 1..available."""
    wanted = set(requested)
    kept = sorted(i for i in wanted if 1 <= i <= available)
    if len(kept) != len(wanted):
        dropped = sorted(i for i in wanted if not 1 <= i <= available)
        logger.debug("ignoring indices past the table (size %d): %s", available, dropped)
    return kept


def _selected(subtable: ResolvedDirective, axis: Axis, available: int) -> list[int]:
    # Clamp before enumerating, ranges may reach far past the table.
    if subtable.max_index(axis) > available:
        logger.debug("ignoring %s indices past the table (size %d), up to %d",
                     axis.name.lower(), available, subtable.max_index(axis))
    return select_indices(subtable.indices(axis, limit=available), available)


def project(
    table: Table,
    subtable: Optional[ResolvedDirective] = None,
    colors: Optional[ResolvedDirective] = None,
) -> ProjectedTable:
    lines = list(range(1, table.height + 1))
    columns = list(range(1, table.width + 1))
    if subtable is not None:
        if Axis.LINE in subtable.axes:
            lines = _selected(subtable, Axis.LINE, table.height)
        if Axis.COLUMN in subtable.axes:
            columns = _selected(subtable, Axis.COLUMN, table.width)

    rows = []
    for li in lines:
        row = table.line(li)
        rows.append(tuple(
            ColoredCell(
                cell=row[ci - 1],
                color=color_at(colors, li, ci) if colors is not None else ColorTag.BLACK,
                line=li,
                column=ci,
            )
            for ci in columns
        ))
    return ProjectedTable(rows=tuple(rows), lines=tuple(lines), columns=tuple(columns))

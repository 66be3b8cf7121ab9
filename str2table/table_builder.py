"""
Table builder: typed, rectangular grid of cells.

Width is the longest line's cell count; shorter lines are padded with empty
text cells so every (line, column) inside the table's dimensions exists.
All public indices are 1-based, matching the directive syntax.
"""

from __future__ import annotations

from typing import Iterator, Optional, Sequence

from .cell_types import Cell, ParseMode, infer_cell
from .directives import ResolvedDirective


class Table:
    """Rows of typed cells. Read-only once built."""

    def __init__(self, rows: Sequence[Sequence[Cell]]):
        width = max((len(r) for r in rows), default=0)
        self._rows: tuple[tuple[Cell, ...], ...] = tuple(
            tuple(r) + (Cell.empty(),) * (width - len(r)) for r in rows
        )
        self._width = width

    @property
    def height(self) -> int:
        return len(self._rows)

    @property
    def width(self) -> int:
        return self._width

    @property
    def shape(self) -> tuple[int, int]:
        return self.height, self.width

    @property
    def rows(self) -> tuple[tuple[Cell, ...], ...]:
        return self._rows

    def __len__(self) -> int:
        return self.height

    def __iter__(self) -> Iterator[tuple[Cell, ...]]:
        return iter(self._rows)

    def has_line(self, line: int) -> bool:
        return 1 <= line <= self.height

    def has_column(self, column: int) -> bool:
        return 1 <= column <= self.width

    def line(self, line: int) -> tuple[Cell, ...]:
        if not self.has_line(line):
            raise IndexError(f"line {line} out of range 1..{self.height}")
        return self._rows[line - 1]

    def column(self, column: int) -> tuple[Cell, ...]:
        if not self.has_column(column):
            raise IndexError(f"column {column} out of range 1..{self.width}")
        return tuple(r[column - 1] for r in self._rows)

    def cell(self, line: int, column: int) -> Cell:
        if not self.has_column(column):
            raise IndexError(f"column {column} out of range 1..{self.width}")
        return self.line(line)[column - 1]

    def values(self) -> list[list]:
        return [[c.value for c in r] for r in self._rows]

    def __repr__(self) -> str:
        return f"Table({self.height}x{self.width})"


def build_table(
    raw_grid: Sequence[Sequence[str]],
    force: Optional[ResolvedDirective] = None,
    parse_mode: ParseMode = ParseMode.AUTO,
) -> Table:
    rows = [
        [infer_cell(raw, li, ci, force, parse_mode) for ci, raw in enumerate(line, start=1)]
        for li, line in enumerate(raw_grid, start=1)
    ]
    return Table(rows)

"""
Console rendering of a projected table.

Draws the table with ASCII borders in grey, every cell left aligned and
colored by its resolved color. Uncolored (black) cells use the terminal's
default color.
"""

from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table as RichTable
from rich.text import Text

from .projector import ProjectedTable
from .range_spec import ColorTag

BORDER_STYLE = "bright_black"

COLOR_STYLES: dict[ColorTag, str] = {
    ColorTag.BLACK: "",
    ColorTag.RED: "red",
    ColorTag.GREEN: "green",
    ColorTag.BLUE: "blue",
    ColorTag.YELLOW: "yellow",
    ColorTag.GREY: "bright_black",
    ColorTag.WHITE: "white",
}


def render_table(table: ProjectedTable) -> RichTable:
    out = RichTable(
        box=box.ASCII,
        show_header=False,
        show_lines=True,
        border_style=BORDER_STYLE,
        pad_edge=True,
    )
    for _ in range(table.width):
        out.add_column(justify="left", no_wrap=True)
    for row in table.rows:
        out.add_row(*(Text(cc.cell.render(), style=COLOR_STYLES[cc.color]) for cc in row))
    return out


def print_table(table: ProjectedTable, console: Optional[Console] = None) -> None:
    console = console or Console()
    if table.height == 0 or table.width == 0:
        console.print(Text("(empty table)", style=BORDER_STYLE))
        return
    console.print(render_table(table))

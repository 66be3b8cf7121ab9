"""
Split raw text into lines and cells.

Both patterns are matched literally (no regex) and may be several characters
long. There is no quoting or escaping: a separator inside a cell's intended
content always splits it.

Whitespace around each cell is trimmed and empty cells are dropped, so
"1, 2, 3" split on "," gives three integers and space-aligned columns split
on " " give no phantom empty cells.
"""

from __future__ import annotations

from .errors import ConfigError

DEFAULT_SEPARATOR = " "
DEFAULT_END_LINE = "\n"


def split_lines(text: str, end_line: str = DEFAULT_END_LINE) -> list[str]:
    """
    Split text into lines.

    With a custom end-line pattern that has no newline in it, all '\\n' and
    '\\r' are removed first so the input may be wrapped freely. With the
    default '\\n', a trailing '\\r' is stripped from each line. One empty line
    after the final terminator is dropped.
    """
    if not end_line:
        raise ConfigError("the end-line pattern is empty.", directive="end_line")

    s = str(text or "")
    if "\n" not in end_line:
        s = s.replace("\r", "").replace("\n", "")
    if not s:
        return []

    lines = s.split(end_line)
    if lines and lines[-1] == "":
        lines.pop()
    if end_line == "\n":
        lines = [ln[:-1] if ln.endswith("\r") else ln for ln in lines]
    return lines


def split_cells(line: str, separator: str = DEFAULT_SEPARATOR) -> list[str]:
    """Trimmed, non-empty cells of one line."""
    if not separator:
        raise ConfigError("the separator pattern is empty.", directive="separator")
    cells = (cell.strip() for cell in line.strip().split(separator))
    return [cell for cell in cells if cell]


def tokenize(text: str, separator: str = DEFAULT_SEPARATOR,
             end_line: str = DEFAULT_END_LINE) -> list[list[str]]:
    """Raw string grid: one list of cell strings per line."""
    if not separator:
        raise ConfigError("the separator pattern is empty.", directive="separator")
    return [split_cells(ln, separator) for ln in split_lines(text, end_line)]

"""
File writers for a projected table.

The format follows the output path's suffix:
- .csv   csv module, numbers written unquoted
- .txt   cells joined by the separator and lines by the end-line pattern,
         so the file reads back into the same table
- .xlsx  openpyxl workbook with one sheet, numbers stored as numbers

Colors are console-only and never written to files.
"""

from __future__ import annotations

import csv
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import openpyxl
from openpyxl.utils import get_column_letter

from .cell_types import CellKind
from .errors import OutputFormatError
from .projector import ProjectedTable

logger = logging.getLogger(__name__)


class OutputFormat(Enum):
    CSV = "csv"
    TXT = "txt"
    XLSX = "xlsx"


_SUFFIX_FORMATS = {
    ".csv": OutputFormat.CSV,
    ".txt": OutputFormat.TXT,
    ".xlsx": OutputFormat.XLSX,
}

SHEET_TITLE = "Table"


def detect_output_format(path: Path | str) -> OutputFormat:
    suffix = Path(path).suffix.lower()
    fmt = _SUFFIX_FORMATS.get(suffix)
    if fmt is None:
        hint = None
        if suffix == ".xls":
            hint = "Legacy .xls workbooks can't be written, use .xlsx instead."
        raise OutputFormatError(
            f"unsupported file format '{suffix or Path(path).name}'.",
            directive=str(path),
            hint=hint,
        )
    return fmt


def _cell_value(cell):
    if cell.kind is CellKind.TEXT:
        return cell.raw
    return cell.value


def write_csv(table: ProjectedTable, path: Path | str) -> Path:
    path = Path(path)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        for row in table.rows:
            # Numbers as their normalized text, same as the csv module would write them.
            writer.writerow([cc.cell.raw if cc.cell.kind is CellKind.TEXT else cc.cell.render()
                             for cc in row])
    return path


def write_txt(table: ProjectedTable, path: Path | str,
              separator: str = " ", end_line: str = "\n") -> Path:
    path = Path(path)
    # Raw text keeps the input's spelling ("+007", "1.50") for re-reading.
    text = "".join(
        separator.join(cc.cell.raw for cc in row) + end_line
        for row in table.rows
    )
    with open(path, "w", newline="", encoding="utf-8") as f:
        f.write(text)
    return path


def write_xlsx(table: ProjectedTable, path: Path | str) -> Path:
    path = Path(path)
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    widths: dict[int, int] = {}
    for row_idx, row in enumerate(table.rows, start=1):
        for col_idx, cc in enumerate(row, start=1):
            value = _cell_value(cc.cell)
            if cc.cell.kind is CellKind.INTEGER and abs(value) >= 2 ** 53:
                # beyond float precision, keep the digits as text
                value = cc.cell.render()
            ws.cell(row=row_idx, column=col_idx, value=value)
            widths[col_idx] = max(widths.get(col_idx, 0), min(60, len(cc.cell.render())))

    # Approximate auto-fit.
    for col_idx, width in widths.items():
        ws.column_dimensions[get_column_letter(col_idx)].width = width + 3

    wb.save(str(path))
    return path


def export_table(table: ProjectedTable, path: Path | str,
                 separator: str = " ", end_line: str = "\n",
                 fmt: Optional[OutputFormat] = None) -> Path:
    fmt = fmt or detect_output_format(path)
    logger.debug("writing %dx%d table to %s (%s)", table.height, table.width, path, fmt.value)
    if fmt is OutputFormat.CSV:
        return write_csv(table, path)
    if fmt is OutputFormat.TXT:
        return write_txt(table, path, separator, end_line)
    return write_xlsx(table, path)

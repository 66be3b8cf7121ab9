"""
Pipeline - text to typed table to projected, colored subtable.

Stages:
1. Resolve all directives (fails fast, before any input is touched)
2. Tokenize raw text into a string grid
3. Type every cell and pad into a rectangular Table
4. Project the subtable and attach colors
5. Hand the result to a file writer or the console
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console

from . import console as console_out
from . import exporters
from .directives import (
    ResolvedDirective,
    resolve_export_color,
    resolve_export_subtable,
    resolve_force_parse,
)
from .projector import ProjectedTable, project
from .reader import read_input
from .settings import Settings
from .table_builder import Table, build_table
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


class Str2TablePipeline:
    """Runs one input through the whole pipeline with fixed settings."""

    def __init__(self, settings: Optional[Settings] = None):
        """
        Resolve every directive of ``settings`` up front.

        Raises:
            AxisConflict, TypeConflict: the force-parse directive is unusable.
        """
        self.settings = settings or Settings()
        self.force: ResolvedDirective = resolve_force_parse(self.settings.force_parse)
        self.subtable: ResolvedDirective = resolve_export_subtable(self.settings.export_subtable)
        self.colors: ResolvedDirective = resolve_export_color(self.settings.export_color)

    def build(self, text: str) -> Table:
        grid = tokenize(text, self.settings.separator, self.settings.end_line)
        table = build_table(grid, self.force, self.settings.parse_mode)
        logger.debug("built %dx%d table", table.height, table.width)
        return table

    def project(self, table: Table) -> ProjectedTable:
        return project(table, self.subtable, self.colors)

    def run(self, text: str) -> ProjectedTable:
        return self.project(self.build(text))

    def read(self) -> str:
        return read_input(self.settings.input)

    def export(self, projected: ProjectedTable, console: Optional[Console] = None) -> Optional[Path]:
        """Write to the output file, or print to the console when there is none."""
        if self.settings.output is None:
            console_out.print_table(projected, console)
            return None
        return exporters.export_table(
            projected,
            self.settings.output,
            separator=self.settings.separator,
            end_line=self.settings.end_line,
        )

    def process(self, text: Optional[str] = None, console: Optional[Console] = None) -> Optional[Path]:
        """Read (unless ``text`` is given), build, project and export."""
        if text is None:
            text = self.read()
        return self.export(self.run(text), console)

"""
Error types for str2table.

Every error raised by the core is a Str2TableError. They are all fatal for a
run: the pipeline resolves every directive before any table is built, so a
raised error never leaves a partial table behind. Recoverable conditions
(forced parse failing for one cell, indices past the end of the table,
line/column color overlap) are handled where they are detected and never
raised.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Optional


class ErrorLevel(IntEnum):
    """Severity of an error, ordered so levels can be compared."""
    WARNING = 1  # can be ignored or fixed automatically
    ERROR = 2    # fixable by the user, e.g. re-run with a corrected argument
    FATAL = 3    # unrecoverable, e.g. file not found

    def tag(self) -> str:
        return f"[{self.name.capitalize()}]"


class Str2TableError(Exception):
    """Base class for all str2table errors."""

    description = "str2table failed."
    hint: Optional[str] = None
    level = ErrorLevel.ERROR

    def __init__(
        self,
        reason: str = "",
        *,
        directive: Optional[str] = None,
        fragment: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(reason or self.description)
        self.reason = reason
        self.directive = directive
        self.fragment = fragment
        if hint is not None:
            self.hint = hint

    def describe(self) -> str:
        return self.description

    def message(self, showing_level: ErrorLevel = ErrorLevel.WARNING) -> str:
        """Render the error for the terminal; empty below ``showing_level``."""
        if self.level < showing_level:
            return ""
        parts = [f"{self.level.tag()} {self.describe()}"]
        if self.reason:
            where = ""
            if self.directive is not None:
                where = f'Error happens in "{self.directive}"'
                if self.fragment is not None and self.fragment != self.directive:
                    where += f', at "{self.fragment}"'
                where += ": "
            parts.append(f"This error is caused by the following reason(s):\n\t{where}{self.reason}")
        if self.hint:
            parts.append(f"You may try the following method(s) to fix this:\n\t{self.hint}")
        return "\n".join(parts)


class InvalidRangeSpec(Str2TableError):
    """A directive segment does not match ``<index>[-<index>]<axis><tag>``."""

    description = "The format of this range is wrong."
    hint = "Please check the range again, e.g. '1-2li,4lf' or '1-3l,2c'."


class AxisConflict(Str2TableError):
    """A force-parse directive uses line and column ranges at the same time."""

    description = "This argument causes conflict(s)."
    hint = "Use either 'l' or 'c' in one force-parse directive, not both."


class TypeConflict(Str2TableError):
    """Two ranges on the same axis force different types onto one index."""

    description = "This argument causes conflict(s)."
    hint = "Please check the conflict(s) and try again."

    def __init__(self, reason: str = "", *, index: int = 0,
                 tags: tuple = (), **kwargs):
        super().__init__(reason, **kwargs)
        self.index = index
        self.tags = tags


class ConfigError(Str2TableError):
    """Configuration file or setting value cannot be used."""

    description = "The configuration is missing or wrong."
    hint = "Please check the configuration file and try again."


class OutputFormatError(Str2TableError):
    """Output path has a suffix no writer handles."""

    description = "This file format is unsupported."
    hint = "Use a .csv, .txt or .xlsx output path, or omit it to print to the console."

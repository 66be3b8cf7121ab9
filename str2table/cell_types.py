"""
Cell typing: classify raw cell strings as integer, float or text.

Auto inference tries the integer grammar, then the float grammar, and keeps
the raw string as text otherwise:

    "42"    -> integer 42
    "3.0"   -> float 3.0
    "3.5.1" -> text
    ""      -> text

A force-parse tag only upgrades parsing: when the raw string does not fit the
forced type the cell is auto-inferred instead, never rejected.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from .directives import FORCE_PARSE_FALLBACK_TO_AUTO, ResolvedDirective
from .range_spec import Axis, TypeTag

logger = logging.getLogger(__name__)


class ParseMode(Enum):
    AUTO = "a"
    STRING = "s"


class CellKind(Enum):
    INTEGER = "int"
    FLOAT = "float"
    TEXT = "str"


INTEGER_RE = re.compile(r"^[+-]?\d+$", re.ASCII)
FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)


@dataclass(frozen=True)
class Cell:
    """A typed cell; ``raw`` is the text as it appeared in the input."""
    raw: str
    value: Union[int, float, str]
    kind: CellKind

    @classmethod
    def text(cls, raw: str) -> "Cell":
        return cls(raw=raw, value=raw, kind=CellKind.TEXT)

    @classmethod
    def empty(cls) -> "Cell":
        return cls.text("")

    @property
    def is_numeric(self) -> bool:
        return self.kind is not CellKind.TEXT

    def render(self) -> str:
        """Display form. Integers are normalized ("+007" -> "7")."""
        if self.kind is CellKind.INTEGER:
            return _integer_text(self.raw)
        if self.kind is CellKind.FLOAT:
            return repr(float(self.value))
        return str(self.value)

    def __str__(self) -> str:
        return self.render()


def _integer_text(raw: str) -> str:
    # Built from the raw text, str() of a very long int hits the digit limit.
    digits = raw.lstrip("+-").lstrip("0") or "0"
    return "-" + digits if raw.startswith("-") and digits != "0" else digits


def parse_integer(raw: str) -> Optional[int]:
    if not INTEGER_RE.fullmatch(raw):
        return None
    try:
        return int(raw)
    except ValueError:
        # past the interpreter's int string-conversion digit limit
        return int(Decimal(raw))


def parse_float(raw: str) -> Optional[float]:
    if FLOAT_RE.fullmatch(raw):
        return float(raw)
    return None


def auto_infer(raw: str) -> Cell:
    iv = parse_integer(raw)
    if iv is not None:
        return Cell(raw=raw, value=iv, kind=CellKind.INTEGER)
    fv = parse_float(raw)
    if fv is not None:
        return Cell(raw=raw, value=fv, kind=CellKind.FLOAT)
    return Cell.text(raw)


def force_parse(raw: str, tag: TypeTag) -> Cell:
    """Parse ``raw`` as ``tag``; falls back to auto inference when it does not fit."""
    if tag is TypeTag.STRING:
        return Cell.text(raw)
    if tag is TypeTag.INTEGER:
        iv = parse_integer(raw)
        if iv is not None:
            return Cell(raw=raw, value=iv, kind=CellKind.INTEGER)
    elif tag is TypeTag.FLOAT:
        fv = parse_float(raw)
        if fv is not None:
            return Cell(raw=raw, value=fv, kind=CellKind.FLOAT)

    if not FORCE_PARSE_FALLBACK_TO_AUTO:
        return Cell.text(raw)
    logger.debug("cannot parse %r as %s, using auto inference", raw, tag.name.lower())
    return auto_infer(raw)


def forced_tag(force: Optional[ResolvedDirective], line: int, column: int) -> Optional[TypeTag]:
    """Type forced onto the cell at (line, column), 1-based, if any."""
    if force is None:
        return None
    tag = force.resolved_tag(Axis.LINE, line)
    if tag is None:
        tag = force.resolved_tag(Axis.COLUMN, column)
    return tag


def infer_cell(
    raw: str,
    line: int,
    column: int,
    force: Optional[ResolvedDirective] = None,
    parse_mode: ParseMode = ParseMode.AUTO,
) -> Cell:
    if parse_mode is ParseMode.STRING:
        return Cell.text(raw)
    tag = forced_tag(force, line, column)
    if tag is not None:
        return force_parse(raw, tag)
    return auto_infer(raw)

"""
Range spec parser for line/column directives.

A directive is a comma-separated list of segments without whitespace, each
segment being ``<index>[-<index>]<axis><tag>``:

    force parse      1-2li,4lf      tags s (string), u/i (integer), f (float)
    export color     1lr,2lg,3cb    tags r, g, b, y, x (grey), w
    export subtable  1-3l,1-3c      no tag

Indices are 1-based and inclusive. In a force-parse directive the axis letter
may be left out of a segment (``1-2li,4f``): such segments take the axis named
by the other segments, since one force-parse directive only ever targets one
axis.

Indices past the end of the table are not an error here; they are dropped
when the directive is applied to an actual table.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Union

from .errors import InvalidRangeSpec


class Axis(Enum):
    LINE = "l"
    COLUMN = "c"


class TypeTag(Enum):
    STRING = "s"
    INTEGER = "i"
    FLOAT = "f"


class ColorTag(Enum):
    BLACK = "black"  # default, no color attached
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    GREY = "grey"
    WHITE = "white"


class DirectiveKind(Enum):
    FORCE_PARSE = "force_parse"
    EXPORT_COLOR = "export_color"
    EXPORT_SUBTABLE = "export_subtable"


Tag = Union[TypeTag, ColorTag]


TYPE_TAG_LETTERS: dict[str, TypeTag] = {
    "s": TypeTag.STRING,
    "u": TypeTag.INTEGER,
    "i": TypeTag.INTEGER,
    "f": TypeTag.FLOAT,
}

COLOR_TAG_LETTERS: dict[str, ColorTag] = {
    "r": ColorTag.RED,
    "g": ColorTag.GREEN,
    "b": ColorTag.BLUE,
    "y": ColorTag.YELLOW,
    "x": ColorTag.GREY,
    "w": ColorTag.WHITE,
}

_AXIS_LETTERS = {axis.value: axis for axis in Axis}
_TYPE_LETTER_OUT = {TypeTag.STRING: "s", TypeTag.INTEGER: "i", TypeTag.FLOAT: "f"}
_COLOR_LETTER_OUT = {tag: letter for letter, tag in COLOR_TAG_LETTERS.items()}

_SEGMENT_RE = re.compile(r"^(?P<start>\d+)(?:-(?P<end>\d+))?(?P<letters>[A-Za-z]*)$")


@dataclass(frozen=True)
class RangeSpec:
    """One parsed directive segment: ``start..end`` (inclusive) on ``axis``."""
    axis: Axis
    start: int
    end: int
    tag: Optional[Tag] = None

    def __post_init__(self) -> None:
        if self.start < 1:
            raise InvalidRangeSpec(
                f"index {self.start} is not allowed, lines and columns count from 1."
            )
        if self.start > self.end:
            raise InvalidRangeSpec(
                f"start of range ({self.start}) should not be greater than end ({self.end})."
            )

    @property
    def is_single(self) -> bool:
        return self.start == self.end

    def indices(self) -> range:
        return range(self.start, self.end + 1)

    def covers(self, index: int) -> bool:
        return self.start <= index <= self.end

    def overlaps(self, other: "RangeSpec") -> bool:
        return self.axis is other.axis and self.start <= other.end and other.start <= self.end

    def without(self, other: "RangeSpec") -> list["RangeSpec"]:
        """Parts of this range not covered by ``other`` (same axis only)."""
        if not self.overlaps(other):
            return [self]
        parts = []
        if self.start < other.start:
            parts.append(replace(self, end=other.start - 1))
        if other.end < self.end:
            parts.append(replace(self, start=other.end + 1))
        return parts


# =============================================================================
# Parsing
# =============================================================================

def _tag_table(kind: DirectiveKind) -> dict:
    if kind is DirectiveKind.FORCE_PARSE:
        return TYPE_TAG_LETTERS
    if kind is DirectiveKind.EXPORT_COLOR:
        return COLOR_TAG_LETTERS
    return {}


def _split_letters(letters: str, kind: DirectiveKind, segment: str, directive: str):
    """Split the trailing letters of a segment into (axis letter, tag letter)."""
    if kind is DirectiveKind.EXPORT_SUBTABLE:
        if len(letters) == 1:
            return letters, ""
        if not letters:
            raise InvalidRangeSpec("lack of 'l' or 'c' to specify line or column.",
                                   directive=directive, fragment=segment)
        raise InvalidRangeSpec("should end with 'l' or 'c' only, subtables take no tag.",
                               directive=directive, fragment=segment)

    if not letters:
        raise InvalidRangeSpec("lack of an axis ('l' or 'c') and a tag after the number.",
                               directive=directive, fragment=segment)
    if len(letters) == 2:
        return letters[0], letters[1]
    if len(letters) == 1 and kind is DirectiveKind.FORCE_PARSE and letters not in _AXIS_LETTERS:
        # Axis omitted, taken from the other segments.
        return "", letters
    if len(letters) == 1 and letters in _AXIS_LETTERS:
        expected = "type 's', 'u', 'i' or 'f'" if kind is DirectiveKind.FORCE_PARSE \
            else "color 'r', 'g', 'b', 'y', 'x' or 'w'"
        raise InvalidRangeSpec(f"lack of {expected} at the end.",
                               directive=directive, fragment=segment)
    if len(letters) <= 1:
        raise InvalidRangeSpec("lack of 'l' or 'c' to specify line or column.",
                               directive=directive, fragment=segment)
    raise InvalidRangeSpec("invalid format, too many letters after the number.",
                           directive=directive, fragment=segment)


def _parse_segment(segment: str, kind: DirectiveKind, directive: str) -> tuple[Optional[Axis], int, int, Optional[Tag]]:
    if not segment:
        raise InvalidRangeSpec("an empty segment was found, check for stray commas.",
                               directive=directive, fragment=segment)
    m = _SEGMENT_RE.match(segment)
    if m is None:
        if not segment[0].isdigit():
            reason = "the number is missing, negative or not a number."
        elif "-" in segment and not re.search(r"-\d", segment):
            reason = "the right side of the range is missing or not a number."
        else:
            reason = "invalid format."
        raise InvalidRangeSpec(reason, directive=directive, fragment=segment)

    start = int(m.group("start"))
    end = int(m.group("end")) if m.group("end") is not None else start
    if start == 0 or end == 0:
        raise InvalidRangeSpec("index 0 is not allowed, lines and columns count from 1.",
                               directive=directive, fragment=segment)
    if start > end:
        raise InvalidRangeSpec(
            f"start of range ({start}) should not be greater than end ({end}).",
            directive=directive, fragment=segment,
        )

    axis_letter, tag_letter = _split_letters(m.group("letters"), kind, segment, directive)

    axis: Optional[Axis] = None
    if axis_letter:
        axis = _AXIS_LETTERS.get(axis_letter)
        if axis is None:
            raise InvalidRangeSpec(f"'{axis_letter}' should be 'l' or 'c'.",
                                   directive=directive, fragment=segment)

    tag: Optional[Tag] = None
    if tag_letter:
        tag = _tag_table(kind).get(tag_letter)
        if tag is None:
            if kind is DirectiveKind.FORCE_PARSE:
                reason = f"'{tag_letter}' should be type 's', 'u', 'i' or 'f'."
            else:
                reason = f"'{tag_letter}' should be color 'r', 'g', 'b', 'y', 'x' or 'w'."
            raise InvalidRangeSpec(reason, directive=directive, fragment=segment)

    return axis, start, end, tag


def parse_range_specs(text: str, kind: DirectiveKind) -> list[RangeSpec]:
    """
    Parse a directive string into RangeSpecs, in source order.

    Raises:
        InvalidRangeSpec: on any malformed segment, or a force-parse
            directive where no segment names an axis.
    """
    directive = str(text or "").strip()
    if not directive:
        return []

    parsed = [_parse_segment(seg, kind, directive) for seg in directive.split(",")]

    default_axis = next((axis for axis, _, _, _ in parsed if axis is not None), None)
    if default_axis is None:
        raise InvalidRangeSpec("no line or column specified, add 'l' or 'c' to a segment.",
                               directive=directive)

    return [
        RangeSpec(axis=axis or default_axis, start=start, end=end, tag=tag)
        for axis, start, end, tag in parsed
    ]


# =============================================================================
# Serialization
# =============================================================================

def _tag_letter(tag: Optional[Tag]) -> str:
    if isinstance(tag, TypeTag):
        return _TYPE_LETTER_OUT[tag]
    if isinstance(tag, ColorTag):
        return _COLOR_LETTER_OUT.get(tag, "")
    return ""


def format_range_spec(spec: RangeSpec) -> str:
    rng = str(spec.start) if spec.is_single else f"{spec.start}-{spec.end}"
    return f"{rng}{spec.axis.value}{_tag_letter(spec.tag)}"


def format_range_specs(specs: Iterable[RangeSpec]) -> str:
    """Serialize specs back to directive text; ``parse_range_specs`` reads it back unchanged."""
    return ",".join(format_range_spec(s) for s in specs)

"""
Directive resolution and precedence policies.

Turns the RangeSpecs of one directive into a per-axis range lookup and
enforces the rules that make a directive usable:

- force parse: one axis only (AxisConflict otherwise), and one type per
  index on that axis (TypeConflict otherwise). Equal tags on overlapping
  ranges are merged.
- export color: both axes allowed. A later segment on the same axis
  repaints earlier ones; a cell covered by a line color and a column color
  takes the line color (pick_color).
- export subtable: both axes allowed, indices only.

Ranges are kept as (start, end) pairs and never expanded, so a directive
such as ``1-999999999lr`` costs the same as ``1lr``. Indices are only
enumerated when clamped to an actual table.

The precedence rules live here as named policies so callers and tests use
the same definitions:

- COLOR_PRECEDENCE / pick_color: line color over column color.
- SOURCE_PRECEDENCE: command line over config file (settings.merge_settings,
  merge_directive_specs).
- FORCE_PARSE_FALLBACK_TO_AUTO: a forced type that does not fit a cell falls
  back to auto inference for that cell (see cell_types.force_parse).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from .errors import AxisConflict, TypeConflict
from .range_spec import (
    Axis,
    ColorTag,
    DirectiveKind,
    RangeSpec,
    Tag,
    format_range_spec,
    format_range_specs,
)

logger = logging.getLogger(__name__)


COLOR_PRECEDENCE: tuple[Axis, ...] = (Axis.LINE, Axis.COLUMN)
SOURCE_PRECEDENCE: tuple[str, ...] = ("cli", "config")
FORCE_PARSE_FALLBACK_TO_AUTO = True


def pick_color(line_color: Optional[ColorTag], column_color: Optional[ColorTag]) -> ColorTag:
    """Color of a cell covered by a line color and/or a column color."""
    by_axis = {Axis.LINE: line_color, Axis.COLUMN: column_color}
    for axis in COLOR_PRECEDENCE:
        if by_axis[axis] is not None:
            return by_axis[axis]
    return ColorTag.BLACK


@dataclass
class ResolvedDirective:
    """Ranges of one directive per axis in use, in source order."""
    kind: DirectiveKind
    ranges: dict[Axis, list[RangeSpec]] = field(default_factory=dict)

    @property
    def axes(self) -> tuple[Axis, ...]:
        return tuple(axis for axis in Axis if self.ranges.get(axis))

    @property
    def is_empty(self) -> bool:
        return not self.axes

    @property
    def active_axis(self) -> Optional[Axis]:
        axes = self.axes
        return axes[0] if len(axes) == 1 else None

    def _covering(self, axis: Axis, index: int) -> Optional[RangeSpec]:
        # Later ranges win.
        for spec in reversed(self.ranges.get(axis, ())):
            if spec.covers(index):
                return spec
        return None

    def resolved_tag(self, axis: Axis, index: int) -> Optional[Tag]:
        spec = self._covering(axis, index)
        return spec.tag if spec is not None else None

    def covers(self, axis: Axis, index: int) -> bool:
        return self._covering(axis, index) is not None

    def max_index(self, axis: Axis) -> int:
        return max((s.end for s in self.ranges.get(axis, ())), default=0)

    def indices(self, axis: Axis, limit: Optional[int] = None) -> list[int]:
        """Sorted indices on ``axis``, cut at ``limit`` when given."""
        wanted: set[int] = set()
        for spec in self.ranges.get(axis, ()):
            end = spec.end if limit is None else min(spec.end, limit)
            wanted.update(range(spec.start, end + 1))
        return sorted(wanted)


def resolve_force_parse(specs: Sequence[RangeSpec], directive: Optional[str] = None) -> ResolvedDirective:
    """
    Resolve a force-parse directive.

    Raises:
        AxisConflict: lines and columns are mixed.
        TypeConflict: one index on the axis is given two different types.
    """
    if directive is None and specs:
        directive = format_range_specs(specs)

    first_by_axis: dict[Axis, RangeSpec] = {}
    for spec in specs:
        first_by_axis.setdefault(spec.axis, spec)
    if len(first_by_axis) > 1:
        line_spec = first_by_axis[Axis.LINE]
        column_spec = first_by_axis[Axis.COLUMN]
        raise AxisConflict(
            f"'{format_range_spec(line_spec)}' targets lines while "
            f"'{format_range_spec(column_spec)}' targets columns; "
            "'l' and 'c' can't be used at the same time.",
            directive=directive,
        )

    resolved = ResolvedDirective(DirectiveKind.FORCE_PARSE)
    for spec in specs:
        accepted = resolved.ranges.setdefault(spec.axis, [])
        for previous in accepted:
            if previous.overlaps(spec) and previous.tag is not spec.tag:
                index = max(previous.start, spec.start)
                raise TypeConflict(
                    f"{spec.axis.name.lower()} {index} is forced to both "
                    f"{previous.tag.name.lower()} and {spec.tag.name.lower()}.",
                    directive=directive,
                    fragment=format_range_spec(spec),
                    index=index,
                    tags=(previous.tag, spec.tag),
                )
        accepted.append(spec)
    return resolved


def _by_axis(specs: Sequence[RangeSpec], kind: DirectiveKind) -> ResolvedDirective:
    resolved = ResolvedDirective(kind)
    for spec in specs:
        resolved.ranges.setdefault(spec.axis, []).append(spec)
    return resolved


def resolve_export_color(specs: Sequence[RangeSpec]) -> ResolvedDirective:
    return _by_axis(specs, DirectiveKind.EXPORT_COLOR)


def resolve_export_subtable(specs: Sequence[RangeSpec]) -> ResolvedDirective:
    return _by_axis(specs, DirectiveKind.EXPORT_SUBTABLE)


def resolve(specs: Sequence[RangeSpec], kind: DirectiveKind) -> ResolvedDirective:
    if kind is DirectiveKind.FORCE_PARSE:
        return resolve_force_parse(specs)
    if kind is DirectiveKind.EXPORT_COLOR:
        return resolve_export_color(specs)
    return resolve_export_subtable(specs)


def color_at(colors: ResolvedDirective, line: int, column: int) -> ColorTag:
    """Resolved color of the cell at (line, column), both 1-based."""
    return pick_color(
        colors.resolved_tag(Axis.LINE, line),
        colors.resolved_tag(Axis.COLUMN, column),
    )


# =============================================================================
# Merging config file and command line
# =============================================================================

def _axes(specs: Iterable[RangeSpec]) -> set[Axis]:
    return {s.axis for s in specs}


def merge_directive_specs(
    config_specs: Sequence[RangeSpec],
    cli_specs: Sequence[RangeSpec],
    kind: DirectiveKind,
) -> list[RangeSpec]:
    """
    Merge one directive from the config file with the same directive from the
    command line. Command line entries win at the same (axis, index); config
    entries elsewhere are kept.

    Force parse is single-axis: a command line directive on the other axis
    replaces the config directive entirely. For subtables the command line
    replaces the config selection on each axis it names.
    """
    if not cli_specs:
        return list(config_specs)
    if not config_specs:
        return list(cli_specs)

    if kind is DirectiveKind.FORCE_PARSE and _axes(cli_specs) != _axes(config_specs):
        logger.debug("force parse from command line replaces the config directive (different axis)")
        return list(cli_specs)

    if kind is DirectiveKind.EXPORT_SUBTABLE:
        cli_axes = _axes(cli_specs)
        kept = [s for s in config_specs if s.axis not in cli_axes]
        return kept + list(cli_specs)

    kept = list(config_specs)
    for cli_spec in cli_specs:
        kept = [part for spec in kept for part in spec.without(cli_spec)]
    if kept != list(config_specs):
        logger.debug("%s: config ranges cut by the command line: %s -> %s", kind.value,
                     format_range_specs(config_specs), format_range_specs(kept))
    return kept + list(cli_specs)

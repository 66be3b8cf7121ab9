"""
Effective settings: config file + command line, merged once.

Settings come from two places, a TOML configuration file and the command
line. Per option the command line wins; for force-parse and export-color
directives the merge is per (axis, index) (see directives.merge_directive_specs).
The result is a frozen Settings value that every stage reads and none
modifies.

Configuration file format (several named sections per file are allowed,
pick one with ``-c FILE NAME``; ``default`` is used otherwise):

    [default]
    input = "input.txt"              # stdin when absent
    separator = "#"                  # default " "
    end_line = "\\n"                 # default "\\n"
    parse_mode = "a"                 # "a" auto, "s" everything is text
    force_parse = "1-2li,4lf"        # or the table form below
    export = "output.csv"            # console when absent
    export_color = "1lr,2lg,3cb"
    export_subtable = "1-3l,1-3c"
    configuration = [".", "base"]    # inherit another section ("." = this file)

    [tables]
    force_parse.line = [[1, 1, "s"], [2, 4, "i"]]
    export_color.column = [[1, 1, "r"]]
    export_subtable.line = [1, 3]    # single indices or [start, end] pairs

Keys of the including section win over inherited ones.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from .cell_types import ParseMode
from .directives import SOURCE_PRECEDENCE, merge_directive_specs
from .errors import ConfigError, InvalidRangeSpec
from .exporters import OutputFormat, detect_output_format
from .range_spec import (
    Axis,
    COLOR_TAG_LETTERS,
    DirectiveKind,
    RangeSpec,
    TYPE_TAG_LETTERS,
    format_range_specs,
    parse_range_specs,
)
from .tokenizer import DEFAULT_END_LINE, DEFAULT_SEPARATOR

logger = logging.getLogger(__name__)


DEFAULT_SECTION = "default"

DIRECTIVE_OPTIONS: dict[str, DirectiveKind] = {
    "force_parse": DirectiveKind.FORCE_PARSE,
    "export_color": DirectiveKind.EXPORT_COLOR,
    "export_subtable": DirectiveKind.EXPORT_SUBTABLE,
}

# Older config files used these spellings.
_KEY_ALIASES = {
    "seperation": "separator",
    "export": "output",
}


@dataclass(frozen=True)
class Settings:
    """Immutable effective configuration of one run."""
    input: Optional[Path] = None
    separator: str = DEFAULT_SEPARATOR
    end_line: str = DEFAULT_END_LINE
    parse_mode: ParseMode = ParseMode.AUTO
    force_parse: tuple[RangeSpec, ...] = ()
    export_color: tuple[RangeSpec, ...] = ()
    export_subtable: tuple[RangeSpec, ...] = ()
    output: Optional[Path] = None

    def __post_init__(self) -> None:
        if not self.separator:
            raise ConfigError("the separator pattern is empty.", directive="separator")
        if not self.end_line:
            raise ConfigError("the end-line pattern is empty.", directive="end_line")
        if self.output is not None:
            detect_output_format(self.output)

    @property
    def output_format(self) -> Optional[OutputFormat]:
        return detect_output_format(self.output) if self.output is not None else None

    @property
    def to_console(self) -> bool:
        return self.output is None


OPTION_NAMES: tuple[str, ...] = tuple(f.name for f in fields(Settings))


# =============================================================================
# Config file
# =============================================================================

def _table_form_specs(value: Mapping[str, Any], kind: DirectiveKind, key: str) -> list[RangeSpec]:
    """Directive given as ``{line = [...], column = [...]}``."""
    specs: list[RangeSpec] = []
    for axis_name, items in value.items():
        try:
            axis = {"line": Axis.LINE, "column": Axis.COLUMN}[axis_name]
        except KeyError:
            raise ConfigError(f"'{key}.{axis_name}' should be '{key}.line' or '{key}.column'.",
                              directive=key) from None
        if not isinstance(items, list):
            raise ConfigError(f"'{key}.{axis_name}' should be an array.", directive=key)
        for item in items:
            specs.append(_table_form_item(item, axis, kind, key))
    return specs


def _table_form_item(item: Any, axis: Axis, kind: DirectiveKind, key: str) -> RangeSpec:
    try:
        if kind is DirectiveKind.EXPORT_SUBTABLE:
            if isinstance(item, int):
                return RangeSpec(axis, item, item)
            start, end = item
            return RangeSpec(axis, int(start), int(end))

        start, end, letter = item
        letters = TYPE_TAG_LETTERS if kind is DirectiveKind.FORCE_PARSE else COLOR_TAG_LETTERS
        if letter not in letters:
            raise ConfigError(f"unknown tag {letter!r} in {item!r}.", directive=key)
        return RangeSpec(axis, int(start), int(end), letters[letter])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"cannot read {item!r}: {e}.", directive=key) from e
    except InvalidRangeSpec as e:
        raise ConfigError(f"{item!r}: {e.reason}", directive=key) from e


def directive_from_config(value: Any, kind: DirectiveKind, key: str) -> list[RangeSpec]:
    if isinstance(value, str):
        return parse_range_specs(value, kind)
    if isinstance(value, dict):
        return _table_form_specs(value, kind, key)
    raise ConfigError(f"'{key}' should be a string or a table.", directive=key)


def _expect_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' should be a string, got {type(value).__name__}.", directive=key)
    return value


def _normalize_section(section: Mapping[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for raw_key, value in section.items():
        key = _KEY_ALIASES.get(raw_key, raw_key)
        if key == "configuration":
            continue
        if key in ("input", "output"):
            values[key] = Path(_expect_str(value, raw_key))
        elif key in ("separator", "end_line"):
            values[key] = _expect_str(value, raw_key)
        elif key == "parse_mode":
            try:
                values[key] = ParseMode(_expect_str(value, raw_key))
            except ValueError:
                raise ConfigError(f"'parse_mode' should be 'a' or 's', got {value!r}.",
                                  directive=raw_key) from None
        elif key == "is_auto":
            if not isinstance(value, bool):
                raise ConfigError("'is_auto' should be true or false.", directive=raw_key)
            values["parse_mode"] = ParseMode.AUTO if value else ParseMode.STRING
        elif key in DIRECTIVE_OPTIONS:
            values[key] = directive_from_config(value, DIRECTIVE_OPTIONS[key], raw_key)
        else:
            raise ConfigError(f"unknown option '{raw_key}'.", directive=raw_key)
    return values


def _pick_section(data: Mapping[str, Any], name: Optional[str], path: Path) -> Mapping[str, Any]:
    # Directive tables (force_parse.line = ...) in a flat file are not sections.
    sections = {k: v for k, v in data.items()
                if isinstance(v, dict) and k not in DIRECTIVE_OPTIONS}
    if name is not None:
        if name not in sections:
            raise ConfigError(f"section [{name}] not found in {path}.",
                              hint=f"Available sections: {', '.join(sorted(sections)) or 'none'}.")
        return sections[name]
    if DEFAULT_SECTION in sections:
        return sections[DEFAULT_SECTION]
    if not sections:
        return data
    if len(sections) == 1:
        return next(iter(sections.values()))
    raise ConfigError(f"{path} has several sections, choose one with '-c {path} NAME'.",
                      hint=f"Available sections: {', '.join(sorted(sections))}.")


def load_config_file(path: Path | str, name: Optional[str] = None,
                     _seen: Optional[set] = None) -> dict[str, Any]:
    """
    Read one section of a TOML config file, following ``configuration``
    includes. Returns option name -> value, only for options the file sets.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"configuration file not found: {path}")
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path} is not valid TOML: {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e

    section = _pick_section(data, name, path)
    seen = set(_seen or ())
    marker = (str(path.resolve()), name)
    if marker in seen:
        raise ConfigError(f"configuration include cycle at {path} [{name}].")
    seen.add(marker)

    values = _normalize_section(section)

    include = section.get("configuration")
    if include is None:
        return values
    if isinstance(include, str):
        include = [include]
    if not isinstance(include, list) or not 1 <= len(include) <= 2 \
            or not all(isinstance(x, str) for x in include):
        raise ConfigError("'configuration' should be [path] or [path, name].", directive="configuration")

    inc_path = path if include[0] == "." else Path(include[0])
    if not inc_path.is_absolute() and include[0] != ".":
        inc_path = path.parent / inc_path
    inc_name = include[1] if len(include) == 2 else None
    logger.debug("config %s [%s] includes %s [%s]", path, name, inc_path, inc_name)

    merged = load_config_file(inc_path, inc_name, seen)
    merged.update(values)
    return merged


# =============================================================================
# Merging
# =============================================================================

def merge_settings(file_values: Optional[Mapping[str, Any]] = None,
                   cli_values: Optional[Mapping[str, Any]] = None) -> Settings:
    """Build the effective Settings; command line values win per option."""
    file_values = dict(file_values or {})
    cli_values = dict(cli_values or {})
    for source in (file_values, cli_values):
        unknown = set(source) - set(OPTION_NAMES)
        if unknown:
            raise ConfigError(f"unknown option(s): {', '.join(sorted(unknown))}.")

    by_source = {"cli": cli_values, "config": file_values}
    values: dict[str, Any] = {}
    for name in OPTION_NAMES:
        if name in DIRECTIVE_OPTIONS:
            merged = merge_directive_specs(file_values.get(name) or [], cli_values.get(name) or [],
                                           DIRECTIVE_OPTIONS[name])
            values[name] = tuple(merged)
            continue
        for source in SOURCE_PRECEDENCE:
            if by_source[source].get(name) is not None:
                values[name] = by_source[source][name]
                break

    settings = Settings(**values)
    if settings.output is not None and settings.export_color:
        logger.debug("export color is ignored when writing to %s", settings.output)
    return settings


def load_settings(cli_values: Optional[Mapping[str, Any]] = None,
                  config: Optional[Sequence[str]] = None) -> Settings:
    """Read the config file named by ``config`` = [path] or [path, name] and merge."""
    file_values: dict[str, Any] = {}
    if config:
        if len(config) > 2:
            raise ConfigError("'--config' takes a path and at most one section name.",
                              directive=" ".join(config))
        file_values = load_config_file(config[0], config[1] if len(config) == 2 else None)
    return merge_settings(file_values, cli_values)


# =============================================================================
# Dry run
# =============================================================================

_TOML_ESCAPES = {"\b": "\\b", "\t": "\\t", "\n": "\\n", "\f": "\\f", "\r": "\\r",
                 "\"": "\\\"", "\\": "\\\\"}


def _toml_str(value: str) -> str:
    """TOML basic string; other control characters (incl. DEL) as \\uXXXX."""
    out = []
    for ch in value:
        if ch in _TOML_ESCAPES:
            out.append(_TOML_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def settings_to_toml(settings: Settings, section: str = DEFAULT_SECTION) -> str:
    lines = [f"[{section}]"]
    if settings.input is not None:
        lines.append(f"input = {_toml_str(str(settings.input))}")
    lines.append(f"separator = {_toml_str(settings.separator)}")
    lines.append(f"end_line = {_toml_str(settings.end_line)}")
    lines.append(f"parse_mode = {_toml_str(settings.parse_mode.value)}")
    for name in DIRECTIVE_OPTIONS:
        specs = getattr(settings, name)
        if specs:
            lines.append(f"{name} = {_toml_str(format_range_specs(specs))}")
    if settings.output is not None:
        lines.append(f"export = {_toml_str(str(settings.output))}")
    return "\n".join(lines) + "\n"


def dump_settings(settings: Settings, path: Path | str, section: str = DEFAULT_SECTION) -> Path:
    path = Path(path)
    path.write_text(settings_to_toml(settings, section), encoding="utf-8")
    return path

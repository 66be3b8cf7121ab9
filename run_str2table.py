#!/usr/bin/env python3
"""
str2table - CLI Entry Point

Parses delimited text (a file or stdin) into a typed table and prints it to
the console, or writes it to a .csv / .txt / .xlsx file.

Usage:
    python run_str2table.py [options] < table.txt
    python run_str2table.py -i table.txt -o table.xlsx

Options:
    -i, --input PATH             Input file (default: stdin)
    -s, --separator PAT          Cell separator, may be several chars (default: " ")
    -e, --end-line PAT           Line terminator (default: newline). When it has no
                                 newline in it, all newlines in the input are removed first
    -p, --parse-mode {a,s}       a: infer int/float/text, s: every cell is text
    -f, --force-parse SPEC       Force types on lines OR columns, e.g. 1-2li,4lf
                                 (s string, u/i integer, f float)
    -S, --export-subtable SPEC   Keep only these lines/columns, e.g. 1-3l,1-3c
    -o, --output PATH            Write to a file, format from the suffix
    -C, --export-color SPEC      Console colors, e.g. 1lr,2lg,3cb
                                 (r g b y x=grey w); line color wins over column color.
                                 Ignored when writing to a file
    -c, --config PATH [NAME]     TOML configuration file and section; the command
                                 line wins on conflicts
    -d, --dry PATH               Write the effective settings to PATH and exit
    -v, --verbose                Debug logging

Examples:
    # '#' separated, lines 1-2 as integers, line 4 as floats
    python run_str2table.py -s '#' -f 1-2li,4f < data.txt

    # color the first two lines, blue third column, first 3x3 block only
    python run_str2table.py -C 1lr,2lg,3cb -S 1-3l,1-3c -i data.txt

    # settings from a config file, output to a spreadsheet
    python run_str2table.py -c str2table.toml default -o out.xlsx
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from str2table import __version__
from str2table.cell_types import ParseMode
from str2table.errors import Str2TableError
from str2table.pipeline import Str2TablePipeline
from str2table.range_spec import DirectiveKind, parse_range_specs
from str2table.settings import dump_settings, load_settings


def _directive(kind: DirectiveKind):
    def parse(text: str):
        return parse_range_specs(text, kind)
    parse.__name__ = kind.value
    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="str2table",
        description="Parse a string to a table",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-i", "--input", type=str,
                        help="Input file (default: stdin)")
    parser.add_argument("-s", "--separator", type=str,
                        help='Cell separator, may be several chars (default: " ")')
    parser.add_argument("-e", "--end-line", type=str,
                        help="Line terminator (default: newline)")
    parser.add_argument("-p", "--parse-mode", choices=[m.value for m in ParseMode],
                        help="a: auto inference (default), s: every cell is text")
    parser.add_argument("-f", "--force-parse", type=_directive(DirectiveKind.FORCE_PARSE),
                        help="Force types on lines or columns, e.g. 1-2li,4lf")
    parser.add_argument("-S", "--export-subtable", type=_directive(DirectiveKind.EXPORT_SUBTABLE),
                        help="Lines/columns to keep, e.g. 1-3l,1-3c")

    parser.add_argument("-o", "--output", type=str,
                        help="Output file (.csv, .txt, .xlsx); console if not set")
    parser.add_argument("-C", "--export-color", type=_directive(DirectiveKind.EXPORT_COLOR),
                        help="Console colors, e.g. 1lr,2lg,3cb (ignored with -o)")

    parser.add_argument("-c", "--config", nargs="+", metavar=("PATH", "NAME"),
                        help="TOML configuration file and optional section name")
    parser.add_argument("-d", "--dry", type=str,
                        help="Write the effective settings to this TOML file and exit")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Verbose output")
    return parser


def cli_values(args: argparse.Namespace) -> dict:
    """Options actually given on the command line, keyed like Settings."""
    values = {
        "input": Path(args.input) if args.input else None,
        "separator": args.separator,
        "end_line": args.end_line,
        "parse_mode": ParseMode(args.parse_mode) if args.parse_mode else None,
        "force_parse": args.force_parse,
        "export_color": args.export_color,
        "export_subtable": args.export_subtable,
        "output": Path(args.output) if args.output else None,
    }
    return {k: v for k, v in values.items() if v is not None}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except Str2TableError as e:
        print(e.message(), file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(cli_values(args), args.config)
        # Resolving the directives here rejects conflicts before a dry-run dump too.
        pipeline = Str2TablePipeline(settings)
        if args.dry:
            path = dump_settings(settings, args.dry)
            print(f"Settings written to: {path}")
            return 0

        out = pipeline.process()
    except Str2TableError as e:
        print(e.message(), file=sys.stderr)
        return 2
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if out is not None and args.verbose:
        print(f"Exported: {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

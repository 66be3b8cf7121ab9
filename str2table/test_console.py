import io
import sys
import unittest
from pathlib import Path

from rich.console import Console


# Allow `import str2table.*` when running from repo root.
APP_ROOT = Path(__file__).resolve().parents[1]
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))


from str2table import console as console_out  # noqa: E402
from str2table.directives import resolve_export_color, resolve_export_subtable  # noqa: E402
from str2table.projector import project  # noqa: E402
from str2table.range_spec import DirectiveKind, parse_range_specs  # noqa: E402
from str2table.table_builder import build_table  # noqa: E402
from str2table.tokenizer import tokenize  # noqa: E402


def _console(color: bool = False) -> Console:
    if color:
        return Console(file=io.StringIO(), width=100, force_terminal=True, color_system="standard")
    return Console(file=io.StringIO(), width=100, color_system=None)


class TestConsoleOutput(unittest.TestCase):
    def test_plain_ascii_table(self) -> None:
        projected = project(build_table(tokenize("+007 2.50 abc\n1\n")))
        con = _console()
        console_out.print_table(projected, con)
        out = con.file.getvalue()
        lines = out.splitlines()
        self.assertTrue(lines[0].startswith("+"))
        self.assertTrue(lines[-1].startswith("+"))
        # integers normalized, floats as Python floats, text kept
        self.assertIn("| 7 ", out)
        self.assertIn(" 2.5 ", out)
        self.assertIn(" abc ", out)
        self.assertEqual(len([ln for ln in lines if ln.startswith("| 7 ")]), 1)

    def test_colors_are_applied(self) -> None:
        colors = resolve_export_color(parse_range_specs("1lr,2cb", DirectiveKind.EXPORT_COLOR))
        projected = project(build_table(tokenize("1 2\n3 4\n")), colors=colors)
        con = _console(color=True)
        console_out.print_table(projected, con)
        out = con.file.getvalue()
        self.assertIn("\x1b[31m", out)  # red line 1
        self.assertIn("\x1b[34m", out)  # blue column 2

    def test_empty_table(self) -> None:
        sub = resolve_export_subtable(parse_range_specs("9l", DirectiveKind.EXPORT_SUBTABLE))
        projected = project(build_table(tokenize("1 2\n")), sub)
        con = _console()
        console_out.print_table(projected, con)
        self.assertIn("(empty table)", con.file.getvalue())

    def test_render_table_columns(self) -> None:
        projected = project(build_table(tokenize("1 2 3\n")))
        rendered = console_out.render_table(projected)
        self.assertEqual(len(rendered.columns), 3)
        self.assertEqual(rendered.row_count, 1)


if __name__ == "__main__":
    unittest.main()

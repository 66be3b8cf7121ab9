"""
str2table - delimited text to typed tables

Splits a character stream into lines and cells, types every cell (integer,
float or text, optionally forced per line or column), and exports a selected
subtable to the console (with colors), CSV, plain text or an Excel workbook.

Modules:
- range_spec: parse line/column directives such as 1-2li,4lf
- directives: resolve directives, conflicts and precedence policies
- tokenizer: split raw text into lines and cells
- cell_types: integer/float/text inference and forced parsing
- table_builder: padded, typed Table
- projector: subtable selection and color attachment
- settings: TOML config file + command line merged into Settings
- reader: file or stdin input
- exporters: csv / txt / xlsx writers
- console: colored console rendering
- pipeline: end-to-end orchestration
"""

__version__ = "0.1.0"
__all__ = [
    "range_spec",
    "directives",
    "tokenizer",
    "cell_types",
    "table_builder",
    "projector",
    "settings",
    "reader",
    "exporters",
    "console",
    "pipeline",
]

"""
Read the raw input: a whole file, or all of stdin when no path is given.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, TextIO


def read_input(path: Optional[Path | str] = None, stdin: Optional[TextIO] = None) -> str:
    if path is not None:
        return Path(path).read_text(encoding="utf-8")
    stream = stdin if stdin is not None else sys.stdin
    return stream.read()

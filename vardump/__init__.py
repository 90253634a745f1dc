# vardump/__init__.py
"""Readable dumps of live Python values for debugging.

Renders nested, possibly cyclic values as annotated, indented text with
bounded depth, item counts and string lengths, in plain text, ANSI color
or HTML. Two values can be compared with a line diff of their dumps.

Example:
    from vardump import Dumper, dump, diff

    dump({"a": 1})
    # <#dump // app.py:3
    # #dict {
    #   a => 1 #int
    # }

    d = Dumper(max_depth=2, exclude_fields=["password"])
    d.diff(before, after)
"""

from .colors import Color, ColorScheme, Colorizer
from .config import DumpConfig
from .dumper import (
    Dumper,
    dd,
    default_dumper,
    diff,
    diff_html,
    diff_str,
    dump,
    dump_html,
    dump_json,
    dump_json_str,
    dump_str,
    fdump,
)
from .field_policy import FieldAction, FieldMatchMode, FieldPolicy
from .linediff import DiffKind, DiffOp, diff_lines, split_lines

__version__ = "0.1.0"

__all__ = [
    # Dumper
    "Dumper",
    "DumpConfig",
    "default_dumper",
    # Dump helpers
    "dump",
    "dump_str",
    "dump_html",
    "dump_json",
    "dump_json_str",
    "dd",
    "fdump",
    # Diff helpers
    "diff",
    "diff_str",
    "diff_html",
    "diff_lines",
    "split_lines",
    "DiffKind",
    "DiffOp",
    # Field policy
    "FieldAction",
    "FieldMatchMode",
    "FieldPolicy",
    # Colors
    "Color",
    "ColorScheme",
    "Colorizer",
]

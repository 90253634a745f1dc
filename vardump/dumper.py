# vardump/dumper.py
"""Dumper facade: text, HTML, JSON and diff output.

Usage:
    from vardump import Dumper

    d = Dumper(max_depth=3, redact_sensitive=True)
    d.dump(user)                  # print to the writer (stdout by default)
    text = d.dump_str(user)       # same output, as a string
    page = d.dump_html(user)      # <pre> block with colored spans
    d.diff(before, after)         # line diff of two dumps

A Dumper is immutable once built. Every call resolves its own colorizer
and creates its own reference tracker, so one instance can be shared
between threads and back-reference ids always restart at 1.
"""

import copy
import html
import json
import logging
import sys
from typing import Any, Callable, Optional, Tuple

from .caller import find_caller_location
from .colors import (
    Color,
    Colorizer,
    colorize_ansi,
    colorize_html,
    colorize_html_plain,
    colorize_unstyled,
)
from .config import INDENT_WIDTH, DumpConfig
from .kinds import type_name
from .linediff import diff_lines, format_diff, split_lines
from .renderer import ValueRenderer
from .terminal import detect_color, enable_virtual_terminal

logger = logging.getLogger(__name__)

__all__ = [
    "DumpConfig",
    "Dumper",
    "default_dumper",
    "dd",
    "diff",
    "diff_html",
    "diff_str",
    "dump",
    "dump_html",
    "dump_json",
    "dump_json_str",
    "dump_str",
    "fdump",
]

HTML_OPEN = (
    "<div style='background-color:black;'>"
    '<pre style="background-color:black; color:white; padding:5px; border-radius: 5px">\n'
)
HTML_CLOSE = "</pre></div>"

NO_ARGS_JSON = '{"error": "dump_json called with no arguments"}'

# Called by dd() after dumping; tests replace it to keep the process alive
exit_func: Callable[[int], Any] = sys.exit


class Dumper:
    """Configurable value dumper.

    Args:
        **options: See DumpConfig.with_options for the accepted options.
    """

    def __init__(self, **options: Any):
        self.config = DumpConfig().with_options(**options)
        self._caller_fn: Callable[[int], Optional[Tuple[str, int]]] = find_caller_location

    def with_options(self, **options: Any) -> "Dumper":
        """Return a copy of this dumper with more options applied."""
        clone = self._clone()
        clone.config = self.config.with_options(**options)
        return clone

    def _clone(self) -> "Dumper":
        return copy.copy(self)

    @property
    def writer(self) -> Any:
        """Output stream, resolved at call time so redirected stdout is honored."""
        if self.config.writer is not None:
            return self.config.writer
        return sys.stdout

    def _resolve_colorizer(self) -> Colorizer:
        if self.config.disable_color:
            return colorize_unstyled
        if detect_color(self.writer):
            enable_virtual_terminal()
            return colorize_ansi
        return colorize_unstyled

    def _html_colorizer(self) -> Colorizer:
        if self.config.disable_color:
            return colorize_html_plain
        return colorize_html

    def _header(self, label: str, colorize: Colorizer) -> str:
        """Source location line, or an empty string when unavailable."""
        if self.config.disable_header:
            return ""
        location = self._caller_fn(self.config.skip_stack_frames)
        if location is None:
            return ""
        path, line = location
        return colorize(Color.MUTED, f"<#{label} // {path}:{line}") + "\n"

    def _render(self, values: Tuple[Any, ...], colorize: Colorizer) -> str:
        """Render values with one shared tracker, one per line."""
        renderer = ValueRenderer(self.config, colorize)
        for value in values:
            renderer.render(value)
            renderer.write("\n")
        return renderer.text()

    # -- dump ---------------------------------------------------------------

    def dump_str(self, *values: Any) -> str:
        """Render values to a string, header first."""
        colorize = self._resolve_colorizer()
        return self._header("dump", colorize) + self._render(values, colorize)

    def dump(self, *values: Any) -> None:
        """Write the rendered values to the writer."""
        self.writer.write(self.dump_str(*values))

    def dump_html(self, *values: Any) -> str:
        """Render values as an HTML <pre> block with colored spans."""
        colorize = self._html_colorizer()
        body = self._header("dump", colorize) + self._render(values, colorize)
        return HTML_OPEN + body + HTML_CLOSE

    def dump_json_str(self, *values: Any) -> str:
        """Serialize values as indented JSON.

        A single value is serialized as-is, several values as a list.
        Failures are reported as an ``{"error": ...}`` document instead
        of being raised.
        """
        if not values:
            return NO_ARGS_JSON
        data = values[0] if len(values) == 1 else list(values)
        try:
            return json.dumps(data, indent=INDENT_WIDTH)
        except (TypeError, ValueError) as exc:
            logger.debug("JSON encoding failed: %s", exc)
            return json.dumps({"error": str(exc)})

    def dump_json(self, *values: Any) -> None:
        """Write the JSON form of values to the writer."""
        self.writer.write(self.dump_json_str(*values) + "\n")

    def dd(self, *values: Any) -> None:
        """Dump values, then exit with status 1."""
        self.dump(*values)
        exit_func(1)

    # -- diff ---------------------------------------------------------------

    def _diff_body(self, a: Any, b: Any, colorize: Colorizer, html_mode: bool) -> str:
        # Each side gets its own tracker so back-reference ids line up
        left = self._render((a,), colorize)
        right = self._render((b,), colorize)

        if type(a) is not type(b):
            left_type = f"type: {type_name(a)}"
            right_type = f"type: {type_name(b)}"
            if html_mode:
                left_type = html.escape(left_type, quote=False)
                right_type = html.escape(right_type, quote=False)
            left = left_type + "\n" + left
            right = right_type + "\n" + right

        ops = diff_lines(split_lines(left), split_lines(right))
        return format_diff(ops, colorize, html_mode)

    def diff_str(self, a: Any, b: Any) -> str:
        """Render a line diff between the dumps of two values."""
        colorize = self._resolve_colorizer()
        return self._header("diff", colorize) + self._diff_body(a, b, colorize, html_mode=False)

    def diff(self, a: Any, b: Any) -> None:
        """Write the diff of two values to the writer."""
        self.writer.write(self.diff_str(a, b))

    def diff_html(self, a: Any, b: Any) -> str:
        """Render the diff of two values as an HTML <pre> block."""
        colorize = self._html_colorizer()
        body = self._header("diff", colorize) + self._diff_body(a, b, colorize, html_mode=True)
        return HTML_OPEN + body + HTML_CLOSE


default_dumper = Dumper()


def dump(*values: Any) -> None:
    """Dump values to stdout with the default dumper."""
    default_dumper.dump(*values)


def dump_str(*values: Any) -> str:
    """Render values to a string with the default dumper."""
    return default_dumper.dump_str(*values)


def dump_html(*values: Any) -> str:
    """Render values as HTML with the default dumper."""
    return default_dumper.dump_html(*values)


def dump_json(*values: Any) -> None:
    """Print values as JSON with the default dumper."""
    default_dumper.dump_json(*values)


def dump_json_str(*values: Any) -> str:
    """Serialize values as JSON with the default dumper."""
    return default_dumper.dump_json_str(*values)


def dd(*values: Any) -> None:
    """Dump values with the default dumper, then exit."""
    default_dumper.dd(*values)


def diff(a: Any, b: Any) -> None:
    """Print the diff of two values with the default dumper."""
    default_dumper.diff(a, b)


def diff_str(a: Any, b: Any) -> str:
    """Render the diff of two values with the default dumper."""
    return default_dumper.diff_str(a, b)


def diff_html(a: Any, b: Any) -> str:
    """Render the diff of two values as HTML with the default dumper."""
    return default_dumper.diff_html(a, b)


def fdump(writer: Any, *values: Any) -> None:
    """Dump values to the given writer."""
    default_dumper.with_options(writer=writer).dump(*values)

# vardump/colors.py
"""Colorizers for the three render targets.

A colorizer takes a semantic color role and a piece of text and returns
the styled text. The renderer only ever talks in roles; which escape
codes or HTML colors a role maps to is decided here.

Usage:
    from vardump.colors import Color, colorize_ansi, colorize_html

    colorize_ansi(Color.NUMBER, "42")   # "\\033[38;5;38m42\\033[0m"
    colorize_html(Color.NUMBER, "42")   # '<span style="color:#40c0ff">42</span>'
"""

import html
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict


class Color(Enum):
    """Semantic color roles used by the renderer."""
    MUTED = "muted"          # type tags, headers, truncation markers
    ACCENT = "accent"        # quotes, field visibility markers, True
    STRING = "string"        # string contents, stringer output, nil types
    NUMBER = "number"        # numbers, indices, hex bytes
    KEY = "key"              # map keys, hex offsets
    REF = "ref"              # back-reference markers
    DELETED = "deleted"      # diff deletions
    INSERTED = "inserted"    # diff insertions
    DEFAULT = "default"
    PLAIN = "plain"          # field names, separators; escaped but never tinted


@dataclass(frozen=True)
class ColorScheme:
    """Color scheme for ANSI rendering.

    All values are ANSI escape codes.
    """
    reset: str = "\033[0m"

    muted: str = "\033[90m"            # Gray
    accent: str = "\033[33m"           # Yellow
    string: str = "\033[1;38;5;113m"   # Bold lime
    number: str = "\033[38;5;38m"      # Cyan
    key: str = "\033[38;5;170m"        # Magenta
    ref: str = "\033[38;5;247m"        # Light gray
    deleted: str = "\033[31m"          # Red
    inserted: str = "\033[32m"         # Green
    default: str = "\033[38;5;208m"    # Orange

    def code(self, color: Color) -> str:
        """Return the escape code for a color role."""
        return getattr(self, color.value)


# Default color scheme
DEFAULT_COLOR_SCHEME = ColorScheme()

# Colors used for <span style="color:..."> in HTML output
HTML_COLORS: Dict[Color, str] = {
    Color.MUTED: "#999",
    Color.ACCENT: "#ffb400",
    Color.STRING: "#80ff80",
    Color.NUMBER: "#40c0ff",
    Color.KEY: "#d087d0",
    Color.REF: "#aaa",
    Color.DELETED: "#ff5f5f",
    Color.INSERTED: "#55d655",
    Color.DEFAULT: "#ff7f00",
}

HTML_SPAN_OPEN = '<span style="color:'

Colorizer = Callable[[Color, str], str]


def colorize_unstyled(color: Color, text: str) -> str:
    """Return the text without any styling."""
    return text


def colorize_ansi(color: Color, text: str) -> str:
    """Wrap the text in the ANSI escape code for the role."""
    if color is Color.PLAIN:
        return text
    return f"{DEFAULT_COLOR_SCHEME.code(color)}{text}{DEFAULT_COLOR_SCHEME.reset}"


def colorize_html(color: Color, text: str) -> str:
    """Wrap the HTML-escaped text in a colored span.

    Roles missing from HTML_COLORS fall back to the default color.
    """
    if color is Color.PLAIN:
        return html.escape(text, quote=False)
    css = HTML_COLORS.get(color, HTML_COLORS[Color.DEFAULT])
    return f'{HTML_SPAN_OPEN}{css}">{html.escape(text, quote=False)}</span>'


def colorize_html_plain(color: Color, text: str) -> str:
    """Escape text for HTML output without adding any color."""
    return html.escape(text, quote=False)

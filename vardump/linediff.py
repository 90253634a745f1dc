# vardump/linediff.py
"""Line-level diff of two rendered dumps.

Computes a longest-common-subsequence edit script over lines and formats
it with ``- `` / ``+ `` / two-space markers. Changed lines are stripped
of their value colors and tinted as a whole, red for deletions and green
for insertions, so the change stands out regardless of the line content.
"""

import html
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from .colors import HTML_SPAN_OPEN, Color, Colorizer

ANSI_PATTERN = re.compile(r'\033\[[0-9;]*m')


class DiffKind(Enum):
    """Edit operation for one line."""
    EQUAL = "equal"
    DELETE = "delete"
    INSERT = "insert"


@dataclass(frozen=True)
class DiffOp:
    """One line of an edit script."""
    kind: DiffKind
    text: str


def split_lines(text: str) -> List[str]:
    """Split text into lines.

    CRLF and lone CR are normalized to LF and a single trailing newline
    is dropped. Empty text yields no lines.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if text.endswith("\n"):
        text = text[:-1]
    if not text:
        return []
    return text.split("\n")


def diff_lines(a: Sequence[str], b: Sequence[str]) -> List[DiffOp]:
    """Compute the edit script turning ``a`` into ``b``.

    Uses an exact LCS table over suffixes. When deleting from ``a`` and
    inserting from ``b`` are equally good, the deletion comes first.

    Example:
        diff_lines(["A", "B"], ["A", "C"])
        # [EQUAL A, DELETE B, INSERT C]
    """
    n, m = len(a), len(b)
    if n == 0 and m == 0:
        return []

    # dp[i][j] = LCS length of a[i:] and b[j:]
    dp = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        for j in range(m - 1, -1, -1):
            if a[i] == b[j]:
                dp[i][j] = dp[i + 1][j + 1] + 1
            elif dp[i + 1][j] >= dp[i][j + 1]:
                dp[i][j] = dp[i + 1][j]
            else:
                dp[i][j] = dp[i][j + 1]

    ops: List[DiffOp] = []
    i = j = 0
    while i < n and j < m:
        if a[i] == b[j]:
            ops.append(DiffOp(DiffKind.EQUAL, a[i]))
            i += 1
            j += 1
        elif dp[i + 1][j] >= dp[i][j + 1]:
            ops.append(DiffOp(DiffKind.DELETE, a[i]))
            i += 1
        else:
            ops.append(DiffOp(DiffKind.INSERT, b[j]))
            j += 1

    ops.extend(DiffOp(DiffKind.DELETE, line) for line in a[i:])
    ops.extend(DiffOp(DiffKind.INSERT, line) for line in b[j:])
    return ops


def strip_ansi(text: str) -> str:
    """Remove ANSI color sequences."""
    return ANSI_PATTERN.sub("", text)


def is_html_line(line: str) -> bool:
    """Check if a line carries HTML color spans."""
    return HTML_SPAN_OPEN in line


def strip_html_spans(text: str) -> str:
    """Remove color span tags, keeping their content."""
    while True:
        start = text.find(HTML_SPAN_OPEN)
        if start == -1:
            break
        end = text.find('">', start)
        if end == -1:
            break
        text = text[:start] + text[end + 2:]
    return text.replace("</span>", "")


def diff_prefix(kind: DiffKind, colorize: Colorizer) -> str:
    """Marker that starts a diff line."""
    if kind is DiffKind.DELETE:
        return colorize(Color.DELETED, "-") + " "
    if kind is DiffKind.INSERT:
        return colorize(Color.INSERTED, "+") + " "
    return "  "


def tint_line(line: str, kind: DiffKind, colorize: Colorizer, html_mode: bool = False) -> str:
    """Recolor a changed line as a whole; equal lines pass through.

    Args:
        line: Rendered line, possibly already colored.
        kind: Edit operation of the line.
        colorize: Colorizer for the target output.
        html_mode: The line is HTML; its text is unescaped before
            recoloring since the HTML colorizer escapes again.
    """
    if kind is DiffKind.EQUAL:
        return line
    color = Color.DELETED if kind is DiffKind.DELETE else Color.INSERTED
    if html_mode:
        text = html.unescape(strip_html_spans(line))
    elif "\033[" in line:
        text = strip_ansi(line)
    else:
        text = line
    return colorize(color, text)


def format_diff(
    ops: Sequence[DiffOp],
    colorize: Colorizer,
    html_mode: bool = False,
) -> str:
    """Format an edit script, one newline-terminated line per op."""
    return "".join(
        diff_prefix(op.kind, colorize) + tint_line(op.text, op.kind, colorize, html_mode) + "\n"
        for op in ops
    )

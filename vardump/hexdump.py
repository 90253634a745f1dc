# vardump/hexdump.py
"""Hex dump rendering for byte buffers.

Output format (indent 1):
    (bytes) (len=20 cap=20) {
      00000000  68 65 6c 6c 6f 20 77 6f  72 6c 64 0a 00 01 02 03  | hello world..... |
      00000010  04 05 06 07                                       | ....             |
    }
"""

from typing import Union

from .colors import Color, Colorizer, colorize_unstyled
from .config import INDENT_WIDTH

BYTES_PER_ROW = 16
# Column where the ASCII gutter starts, counted from the offset
ASCII_START_COL = 50

ByteBuffer = Union[bytes, bytearray, memoryview]


def buffer_capacity(data: ByteBuffer) -> int:
    """Allocated size of a buffer.

    Only bytearray over-allocates; other buffers report their length.
    """
    if isinstance(data, bytearray):
        return data.__alloc__()
    if isinstance(data, memoryview):
        return data.nbytes
    return len(data)


def format_hex_dump(
    data: ByteBuffer,
    indent: int,
    colorize: Colorizer = colorize_unstyled,
) -> str:
    """Format a byte buffer as offset / hex / ASCII rows.

    Args:
        data: Buffer to render.
        indent: Indent level of the rows; the closing brace sits one
            level shallower.
        colorize: Colorizer for the offset, hex and ASCII columns.

    Returns:
        Multi-line dump ending with the closing brace (no trailing newline).
    """
    raw = bytes(data)
    kind = type(data).__name__
    body_indent = " " * (indent * INDENT_WIDTH)
    close_indent = " " * (max(indent - 1, 0) * INDENT_WIDTH)

    lines = [f"({kind}) (len={len(raw)} cap={buffer_capacity(data)}) {{"]

    for start in range(0, len(raw), BYTES_PER_ROW):
        row = raw[start:start + BYTES_PER_ROW]
        parts = [body_indent]

        offset = f"{start:08x}  "
        parts.append(colorize(Color.KEY, offset))
        visible = len(offset)

        for i in range(BYTES_PER_ROW):
            cell = f"{row[i]:02x} " if i < len(row) else "   "
            if i == 7:
                cell += " "
            parts.append(colorize(Color.NUMBER, cell))
            visible += len(cell)

        parts.append(" " * max(ASCII_START_COL - visible, 1))

        ascii_text = "".join(chr(b) if 0x20 <= b <= 0x7E else "." for b in row)
        parts.append(colorize(Color.MUTED, "| "))
        parts.append(colorize(Color.STRING, ascii_text))
        parts.append(" " * (BYTES_PER_ROW - len(row)))
        parts.append(colorize(Color.MUTED, " |"))
        lines.append("".join(parts))

    lines.append(close_indent + "}")
    return "\n".join(lines)

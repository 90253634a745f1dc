# vardump/terminal.py
"""Terminal capability detection for colored output.

Decides whether dumps written to a stream should carry ANSI colors, and
prepares Windows consoles so the escape codes are actually interpreted.

Usage:
    from vardump.terminal import detect_color, enable_virtual_terminal

    if detect_color(sys.stdout):
        enable_virtual_terminal()
"""

import logging
import os
import sys
from typing import Any, Optional

logger = logging.getLogger(__name__)

# ENABLE_VIRTUAL_TERMINAL_PROCESSING console mode flag
_ENABLE_VT_PROCESSING = 0x0004
# GetStdHandle identifier for standard output
_STD_OUTPUT_HANDLE = -11

_vt_enabled = False


def is_terminal(stream: Optional[Any]) -> bool:
    """Check whether a stream is attached to an interactive terminal.

    Streams without an ``isatty`` method (StringIO-like sinks, custom
    writers) are never terminals.
    """
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (OSError, ValueError):
        # Closed or detached streams
        return False


def detect_color(stream: Optional[Any] = None) -> bool:
    """Decide whether output to ``stream`` should be colorized.

    NO_COLOR wins over FORCE_COLOR; with neither set, color is enabled
    only for interactive terminals.

    Args:
        stream: Output stream; defaults to the current sys.stdout.

    Returns:
        True if ANSI colors should be used.
    """
    if os.environ.get("NO_COLOR"):
        logger.debug("Color disabled by NO_COLOR")
        return False
    if os.environ.get("FORCE_COLOR"):
        logger.debug("Color forced by FORCE_COLOR")
        return True
    if stream is None:
        stream = sys.stdout
    return is_terminal(stream)


def enable_virtual_terminal() -> None:
    """Turn on ANSI escape processing for the Windows console.

    Sets ENABLE_VIRTUAL_TERMINAL_PROCESSING on the stdout console handle
    and reconfigures stdout/stderr to UTF-8 so markers such as the
    back-reference arrow can be printed. Does nothing on other platforms,
    when stdout is not a console, or after the first successful call.
    """
    global _vt_enabled
    if _vt_enabled or sys.platform != "win32":
        return
    _vt_enabled = True

    os.environ.setdefault("PYTHONIOENCODING", "utf-8:replace")
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            try:
                stream.reconfigure(encoding="utf-8", errors="replace")
            except (OSError, ValueError) as exc:
                logger.debug("Could not reconfigure %r: %s", stream, exc)

    import ctypes
    from ctypes import wintypes

    kernel32 = ctypes.windll.kernel32
    handle = kernel32.GetStdHandle(_STD_OUTPUT_HANDLE)
    mode = wintypes.DWORD()
    # GetConsoleMode fails for redirected or piped output
    if not kernel32.GetConsoleMode(handle, ctypes.byref(mode)):
        logger.debug("stdout is not a console, leaving console mode alone")
        return
    if not kernel32.SetConsoleMode(handle, mode.value | _ENABLE_VT_PROCESSING):
        logger.debug("SetConsoleMode failed, colors may not render")

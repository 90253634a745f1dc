# vardump/caller.py
"""Locate the user code that called into vardump.

The dump header names the first stack frame outside this package, so
``dump(x)`` called from ``app/views.py`` line 42 prints
``<#dump // app/views.py:42``.
"""

import inspect
import logging
import os
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

# Frames examined before giving up
MAX_STACK_DEPTH = 10

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
_TESTS_DIR = os.path.join(_PACKAGE_DIR, "tests")


def is_internal_frame(filename: str) -> bool:
    """Check if a source file belongs to vardump itself (tests excluded)."""
    path = os.path.abspath(filename)
    if path.startswith(_TESTS_DIR + os.sep):
        return False
    return path.startswith(_PACKAGE_DIR + os.sep)


def relative_path(filename: str) -> str:
    """Path relative to the working directory, or absolute if that fails."""
    try:
        return os.path.relpath(filename)
    except ValueError:
        # Different drive on Windows
        return os.path.abspath(filename)


def find_caller_location(skip: int = 0) -> Optional[Tuple[str, int]]:
    """Find the first non-vardump frame on the call stack.

    Args:
        skip: Number of additional non-vardump frames to skip, for
            callers that wrap vardump in their own helpers.

    Returns:
        Tuple of (relative path, line number), or None if no suitable
        frame is found within MAX_STACK_DEPTH frames.
    """
    frame = inspect.currentframe()
    try:
        frame = frame.f_back if frame is not None else None
        examined = 0
        while frame is not None and examined < MAX_STACK_DEPTH:
            examined += 1
            filename = frame.f_code.co_filename
            if not is_internal_frame(filename):
                if skip > 0:
                    skip -= 1
                else:
                    return relative_path(filename), frame.f_lineno
            frame = frame.f_back
    finally:
        # Break the reference cycle through the frame objects
        del frame

    logger.debug("No caller frame found within %d frames", MAX_STACK_DEPTH)
    return None

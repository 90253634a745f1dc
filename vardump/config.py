# vardump/config.py
"""Dumper configuration.

Options are plain keyword arguments validated into an immutable
``DumpConfig``. Out-of-range limits are ignored rather than rejected
with an error, so a bad value never stops a debugging session:

    config = DumpConfig().with_options(max_depth=3, max_items=-1)
    config.max_depth   # 3
    config.max_items   # 100 (negative value ignored)
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Optional, Union

from .field_policy import FieldMatchMode, FieldPolicy

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 15
DEFAULT_MAX_ITEMS = 100
DEFAULT_MAX_STRING_LEN = 100000
INDENT_WIDTH = 2

# Options that must be integers >= 0
_LIMIT_OPTIONS = ("max_depth", "max_items", "max_string_len", "skip_stack_frames")
_FLAG_OPTIONS = ("disable_stringer", "disable_color", "disable_header")


@dataclass(frozen=True)
class DumpConfig:
    """Settings for one Dumper.

    Attributes:
        max_depth: Deepest composite level that is expanded.
        max_items: Entries shown per map or sequence before truncating.
        max_string_len: Code points shown per string before truncating.
        writer: Output stream for dump()/diff(); None means the current
            sys.stdout at write time.
        skip_stack_frames: Extra caller frames to skip for the header.
        disable_stringer: Render structure instead of custom __str__ output.
        disable_color: Never colorize.
        disable_header: Omit the source location header.
        field_policy: Struct field filtering and redaction.
    """
    max_depth: int = DEFAULT_MAX_DEPTH
    max_items: int = DEFAULT_MAX_ITEMS
    max_string_len: int = DEFAULT_MAX_STRING_LEN
    writer: Optional[Any] = None
    skip_stack_frames: int = 0
    disable_stringer: bool = False
    disable_color: bool = False
    disable_header: bool = False
    field_policy: FieldPolicy = field(default_factory=FieldPolicy)

    def with_options(self, **options: Any) -> "DumpConfig":
        """Return a copy with the given options applied.

        Supported options: max_depth, max_items, max_string_len, writer,
        skip_stack_frames, disable_stringer, disable_color, disable_header,
        only_fields, exclude_fields, field_match_mode, redact_fields,
        redact_match_mode, redact_sensitive.

        Raises:
            TypeError: For an unknown option name.
            ValueError: For an unknown match mode.
        """
        changes = {}
        policy_changes = {}

        for name, value in options.items():
            if name in _LIMIT_OPTIONS:
                if value < 0:
                    logger.debug("Ignoring %s=%r: must be 0 or greater", name, value)
                    continue
                changes[name] = value
            elif name in _FLAG_OPTIONS:
                changes[name] = bool(value)
            elif name == "writer":
                changes[name] = value
            elif name == "only_fields":
                policy_changes["only_names"] = _names(value)
            elif name == "exclude_fields":
                policy_changes["exclude_names"] = _names(value)
            elif name == "redact_fields":
                policy_changes["redact_names"] = _names(value)
            elif name == "field_match_mode":
                policy_changes["exclude_match_mode"] = FieldMatchMode(value)
            elif name == "redact_match_mode":
                policy_changes["redact_match_mode"] = FieldMatchMode(value)
            elif name == "redact_sensitive":
                policy_changes["redact_sensitive_defaults"] = bool(value)
            else:
                raise TypeError(f"Unknown dumper option: {name!r}")

        if policy_changes:
            changes["field_policy"] = dataclasses.replace(self.field_policy, **policy_changes)
        return dataclasses.replace(self, **changes)


def _names(value: Union[str, Iterable[str], None]) -> FrozenSet[str]:
    """Normalize a field name list; a bare string is a single name."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset((value,))
    return frozenset(value)

# vardump/renderer.py
"""Recursive value renderer.

Walks a value tree and writes the annotated, indented text form into a
buffer. One ValueRenderer handles one render pass; the dumper creates a
fresh one (with a fresh ReferenceTracker) for every call.

Output shape:
    #User {
      +Name => "Alice" #str
      +Tags => #list [
        0 => "admin" #str
      ]
      -_id  => 7 #int
    }
"""

import itertools
import logging
from typing import Any, Callable, Iterable, List, Optional

from .colors import Color, Colorizer, colorize_unstyled
from .config import INDENT_WIDTH, DumpConfig
from .field_policy import REDACTED_PLACEHOLDER, FieldAction
from .hexdump import format_hex_dump
from .kinds import (
    COMPOSITE_KINDS,
    UNSET,
    Kind,
    StructField,
    callable_name,
    classify,
    deref,
    is_stringer,
    is_weak_proxy,
    signature_text,
    struct_fields,
    type_name,
)
from .refs import ReferenceTracker

logger = logging.getLogger(__name__)

MAX_DEPTH_MARKER = "... (max depth)"
TRUNCATED_MARKER = "... (truncated)"
INVALID_MARKER = "<invalid>"
BACK_REFERENCE = "↩ &{}"
ELLIPSIS = "…"
SEPARATOR = " => "

# Kinds cut off by max_depth; scalars and callables always stay visible
_DEPTH_LIMITED_KINDS = COMPOSITE_KINDS | {Kind.BYTES}

# Immutable containers that CPython may share between unrelated places
_SHARED_IMMUTABLE_TYPES = (tuple, frozenset, range)

_CONTROL_ESCAPES = str.maketrans({
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\v": "\\v",
    "\f": "\\f",
    "\x1b": "\\x1b",
})


def escape_control(text: str) -> str:
    """Replace control characters with visible escape sequences."""
    return text.translate(_CONTROL_ESCAPES)


def truncate_text(text: str, max_len: int) -> str:
    """Cut text to max_len code points, marking the cut with an ellipsis."""
    if len(text) > max_len:
        return text[:max_len] + ELLIPSIS
    return text


def safe_repr(value: Any) -> str:
    """repr() that falls back to the default object repr if it raises."""
    try:
        return repr(value)
    except Exception as exc:
        logger.debug("repr() of %s failed: %s", type_name(value), exc)
        return object.__repr__(value)


class ValueRenderer:
    """Renders values for one dump pass.

    Args:
        config: Limits, stringer switch and field policy.
        colorize: Colorizer for the target output.
        tracker: Reference tracker; a fresh one is created if omitted.
    """

    def __init__(
        self,
        config: DumpConfig,
        colorize: Colorizer = colorize_unstyled,
        tracker: Optional[ReferenceTracker] = None,
    ):
        self.config = config
        self.colorize = colorize
        self.tracker = tracker if tracker is not None else ReferenceTracker()
        self._parts: List[str] = []

    def text(self) -> str:
        """Everything rendered so far."""
        return "".join(self._parts)

    def write(self, text: str) -> None:
        self._parts.append(text)

    def _indent(self, depth: int) -> str:
        return " " * (depth * INDENT_WIDTH)

    def _tag(self, name: str) -> str:
        return self.colorize(Color.MUTED, f" #{name}")

    def render(self, value: Any, depth: int = 0, declared: Optional[str] = None) -> None:
        """Render one value at the given nesting depth.

        Args:
            value: Value to render.
            depth: Nesting level; 0 for a top-level value.
            declared: Declared type of the field holding the value, used
                to name None and redacted values.
        """
        kind = classify(value)
        if kind is Kind.INVALID:
            self.write(self.colorize(Color.MUTED, INVALID_MARKER))
            return

        prefix = ""
        if kind is Kind.POINTER:
            target, layers = deref(value)
            if target is None:
                self._render_nil(declared or ("weakproxy" if is_weak_proxy(value) else "weakref"))
                return
            prefix = "*" * layers
            value, kind = target, classify(target)

        if depth > self.config.max_depth and kind in _DEPTH_LIMITED_KINDS:
            self.write(self.colorize(Color.MUTED, MAX_DEPTH_MARKER))
            return

        if not self.config.disable_stringer and is_stringer(value, kind):
            text = self._stringer_text(value)
            if text is not None:
                self.write(self.colorize(Color.STRING, text) + self._tag(prefix + type_name(value)))
                return

        if kind is Kind.NIL:
            self._render_nil(declared)
        elif kind is Kind.BOOL:
            self._render_bool(value, prefix)
        elif kind in (Kind.INT, Kind.FLOAT, Kind.COMPLEX):
            self._render_number(value, kind, prefix)
        elif kind is Kind.STRING:
            self._render_string(value, prefix)
        elif kind is Kind.BYTES:
            self._render_bytes(value, depth)
        elif kind is Kind.CHANNEL:
            self._render_channel(value, prefix)
        elif kind is Kind.FUNC:
            self._render_callable(value, prefix)
        elif kind in COMPOSITE_KINDS:
            self._render_composite(value, kind, depth, prefix)
        else:
            text = escape_control(safe_repr(value))
            self.write(self.colorize(Color.DEFAULT, text) + self._tag(prefix + type_name(value)))

    def _stringer_text(self, value: Any) -> Optional[str]:
        try:
            return escape_control(str(value))
        except Exception as exc:
            logger.debug("str() of %s failed, rendering structure: %s", type_name(value), exc)
            return None

    def _render_nil(self, declared: Optional[str]) -> None:
        self.write(self.colorize(Color.STRING, declared or "None") + self.colorize(Color.MUTED, "(nil)"))

    def _render_bool(self, value: bool, prefix: str) -> None:
        if value:
            text = self.colorize(Color.ACCENT, "True")
        else:
            text = self.colorize(Color.MUTED, "False")
        self.write(text + self._tag(prefix + type_name(value)))

    def _render_number(self, value: Any, kind: Kind, prefix: str) -> None:
        # The base type repr keeps int/float subclasses from customizing it
        if kind is Kind.INT:
            try:
                text = int.__repr__(value)
            except ValueError:
                # Too many digits for decimal conversion
                text = hex(value)
        elif kind is Kind.FLOAT:
            text = float.__repr__(value)
        else:
            text = complex.__repr__(value)
        self.write(self.colorize(Color.NUMBER, text) + self._tag(prefix + type_name(value)))

    def _render_string(self, value: str, prefix: str) -> None:
        text = truncate_text(escape_control(str.__str__(value)), self.config.max_string_len)
        quote = self.colorize(Color.ACCENT, '"')
        self.write(quote + self.colorize(Color.STRING, text) + quote + self._tag(prefix + type_name(value)))

    def _render_bytes(self, value: Any, depth: int) -> None:
        try:
            text = format_hex_dump(value, depth + 1, self.colorize)
        except ValueError as exc:
            # Released memoryview
            logger.debug("Cannot read %s buffer: %s", type_name(value), exc)
            text = self.colorize(Color.MUTED, f"{type_name(value)}(released)")
        self.write(text)

    def _render_channel(self, value: Any, prefix: str) -> None:
        self.write(
            self.colorize(Color.MUTED, prefix + type_name(value))
            + "("
            + self.colorize(Color.NUMBER, hex(id(value)))
            + ")"
        )

    def _render_callable(self, value: Any, prefix: str) -> None:
        if isinstance(value, type):
            text = self.colorize(Color.STRING, value.__name__)
        else:
            text = self.colorize(Color.MUTED, callable_name(value) + signature_text(value))
        self.write(text + self._tag(prefix + type_name(value)))

    def _is_tracked(self, value: Any, kind: Kind) -> bool:
        """Whether a composite takes part in back-reference detection.

        Immutable containers holding only leaf values cannot close a
        cycle, and CPython shares equal constants such as ``()`` or
        ``(1, 2)``, so tracking them would report references the code
        never made. Only the items that will be rendered are checked.
        """
        if kind is not Kind.SEQUENCE or not isinstance(value, _SHARED_IMMUTABLE_TYPES):
            return True
        if isinstance(value, range):
            return False
        for item in itertools.islice(value, self.config.max_items):
            item_kind = classify(item)
            if item_kind in COMPOSITE_KINDS or item_kind is Kind.POINTER:
                return True
        return False

    def _render_composite(self, value: Any, kind: Kind, depth: int, prefix: str) -> None:
        if self._is_tracked(value, kind):
            ref_id = self.tracker.lookup(value)
            if ref_id is not None:
                self.write(self.colorize(Color.REF, BACK_REFERENCE.format(ref_id)))
                return
            self.tracker.register(value)

        header = self.colorize(Color.MUTED, f"#{prefix}{type_name(value)}")
        if kind is Kind.STRUCT:
            self._render_struct(value, depth, header)
        elif kind is Kind.MAP:
            self._render_map(value, depth, header)
        else:
            self._render_sequence(value, depth, header)

    def _render_struct(self, value: Any, depth: int, header: str) -> None:
        policy = self.config.field_policy
        shown = []
        for struct_field in struct_fields(value):
            action = policy.decide(struct_field.name)
            if action is not FieldAction.EXCLUDE:
                shown.append((struct_field, escape_control(struct_field.name), action))

        width = max((len(name) for _, name, _ in shown), default=0)
        inner = self._indent(depth + 1)

        self.write(header + " {\n")
        for struct_field, name, action in shown:
            marker = "+" if struct_field.is_public else "-"
            self.write(
                inner
                + self.colorize(Color.ACCENT, marker)
                + self.colorize(Color.PLAIN, name.ljust(width) + SEPARATOR)
            )
            if action is FieldAction.REDACT:
                self.write(self._redacted(struct_field))
            else:
                self.render(struct_field.value, depth + 1, struct_field.declared)
            self.write("\n")
        self.write(self._indent(depth) + "}")

    def _redacted(self, struct_field: StructField) -> str:
        if struct_field.declared:
            declared = struct_field.declared
        elif struct_field.value is UNSET:
            declared = "invalid"
        else:
            declared = type_name(struct_field.value)
        return self.colorize(Color.MUTED, REDACTED_PLACEHOLDER) + self._tag(declared)

    def _take(self, items: Iterable[Any], owner: Any) -> Optional[List[Any]]:
        """First max_items + 1 items, or None when iteration fails."""
        try:
            return list(itertools.islice(items, self.config.max_items + 1))
        except Exception as exc:
            logger.debug("Cannot iterate %s: %s", type_name(owner), exc)
            return None

    def _write_items(
        self,
        entries: Optional[List[Any]],
        depth: int,
        label: Callable[[Any], str],
    ) -> None:
        """Write one `label => value` line per entry, then any marker line."""
        inner = self._indent(depth + 1)
        if entries is None:
            self.write(inner + self.colorize(Color.MUTED, INVALID_MARKER) + "\n")
            return
        for i, (key, item) in enumerate(entries):
            if i >= self.config.max_items:
                self.write(inner + self.colorize(Color.MUTED, TRUNCATED_MARKER) + "\n")
                break
            self.write(inner + label(key) + self.colorize(Color.PLAIN, SEPARATOR))
            self.render(item, depth + 1)
            self.write("\n")

    def _map_key(self, key: Any) -> str:
        key_text = key if isinstance(key, str) else safe_repr(key)
        return self.colorize(Color.KEY, escape_control(key_text))

    def _render_map(self, value: Any, depth: int, header: str) -> None:
        try:
            items = value.items()
        except Exception as exc:
            logger.debug("%s.items() failed: %s", type_name(value), exc)
            entries = None
        else:
            entries = self._take(items, value)

        self.write(header + " {\n")
        self._write_items(entries, depth, self._map_key)
        self.write(self._indent(depth) + "}")

    def _render_sequence(self, value: Any, depth: int, header: str) -> None:
        entries = self._take(value, value)
        if entries is not None:
            entries = list(enumerate(entries))

        self.write(header + " [\n")
        self._write_items(entries, depth, lambda i: self.colorize(Color.NUMBER, str(i)))
        self.write(self._indent(depth) + "]")


def render_value(
    value: Any,
    config: Optional[DumpConfig] = None,
    colorize: Colorizer = colorize_unstyled,
) -> str:
    """Render a single value with a fresh tracker and return the text."""
    renderer = ValueRenderer(config or DumpConfig(), colorize)
    renderer.render(value)
    return renderer.text()

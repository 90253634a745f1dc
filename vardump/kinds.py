# vardump/kinds.py
"""Value classification and introspection helpers.

The renderer dispatches over a closed set of kinds rather than poking at
arbitrary objects. This module owns the mapping from Python values to
those kinds, plus the accessors the renderer needs: type names, struct
field enumeration, force-readable field access and the stringer
capability check.
"""

import asyncio
import collections.abc
import dataclasses
import functools
import inspect
import logging
import queue
import types
import weakref
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)


class _Unset:
    """Sentinel for a field that exists but holds no readable value."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


class Kind(Enum):
    """Closed set of value kinds the renderer knows how to draw."""
    INVALID = "invalid"
    NIL = "nil"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    COMPLEX = "complex"
    STRING = "string"
    BYTES = "bytes"
    POINTER = "pointer"
    CHANNEL = "channel"
    FUNC = "func"
    MAP = "map"
    SEQUENCE = "sequence"
    STRUCT = "struct"
    OPAQUE = "opaque"


# Kinds that contain nested values and are subject to depth truncation
COMPOSITE_KINDS = frozenset({Kind.STRUCT, Kind.MAP, Kind.SEQUENCE})

# Kinds that never use a custom __str__
_NO_STRINGER_KINDS = frozenset({
    Kind.INVALID, Kind.NIL, Kind.POINTER, Kind.CHANNEL, Kind.FUNC,
})

# Values that produce items over time; iterating them would consume them
_CHANNEL_TYPES: Tuple[type, ...] = (
    queue.Queue,
    queue.SimpleQueue,
    asyncio.Queue,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
)


class StructField(NamedTuple):
    """One field of a struct-like value."""
    name: str
    value: Any
    declared: Optional[str]  # Declared type, if the class annotates one

    @property
    def is_public(self) -> bool:
        return not self.name.startswith("_")


def is_named_tuple(value: Any) -> bool:
    """Check if a value is a named tuple instance."""
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def is_dataclass_instance(value: Any) -> bool:
    """Check if a value is a dataclass instance (not a dataclass type)."""
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def is_weak_proxy(value: Any) -> bool:
    """Check for a weakref.proxy without touching the (maybe dead) referent."""
    return type(value) in weakref.ProxyTypes


def classify(value: Any) -> Kind:
    """Map a value onto its render kind."""
    if value is UNSET:
        return Kind.INVALID
    if value is None:
        return Kind.NIL
    # isinstance() on a dead proxy raises ReferenceError
    if is_weak_proxy(value):
        return Kind.POINTER
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, int):
        return Kind.INT
    if isinstance(value, float):
        return Kind.FLOAT
    if isinstance(value, complex):
        return Kind.COMPLEX
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Kind.BYTES
    # weakref.ref is callable, so it has to be checked before FUNC
    if isinstance(value, weakref.ref):
        return Kind.POINTER
    if isinstance(value, (type, functools.partial)) or inspect.isroutine(value):
        return Kind.FUNC
    if isinstance(value, _CHANNEL_TYPES):
        return Kind.CHANNEL
    if isinstance(value, collections.abc.Mapping):
        return Kind.MAP
    if is_named_tuple(value) or is_dataclass_instance(value):
        return Kind.STRUCT
    if isinstance(value, (collections.abc.Sequence, collections.abc.Set)):
        return Kind.SEQUENCE
    if isinstance(value, collections.abc.Iterator):
        return Kind.CHANNEL
    if isinstance(value, (types.ModuleType, BaseException)):
        return Kind.OPAQUE
    try:
        has_dict = hasattr(value, "__dict__")
    except Exception as exc:
        logger.debug("Cannot look up %s.__dict__: %s", type_name(value), exc)
        return Kind.OPAQUE
    if has_dict or slot_names(type(value)):
        return Kind.STRUCT
    return Kind.OPAQUE


def type_name(value: Any) -> str:
    """Display name for the type of a value."""
    return type(value).__name__


def annotation_name(annotation: Any) -> str:
    """Display name for a declared type annotation.

    String annotations (including postponed ones) are kept verbatim.
    """
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, type):
        return annotation.__name__
    return repr(annotation).replace("typing.", "")


def declared_types(cls: type) -> Dict[str, str]:
    """Collect annotated attribute types across a class hierarchy."""
    declared: Dict[str, str] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        try:
            annotations = inspect.get_annotations(klass)
        except Exception as exc:
            # Unresolvable forward references and the like
            logger.debug("Cannot read annotations of %s: %s", klass.__name__, exc)
            continue
        for name, annotation in annotations.items():
            declared[name] = annotation_name(annotation)
    return declared


def slot_names(cls: type) -> List[str]:
    """Names of all __slots__ attributes, base classes first.

    Private slot names are returned in their mangled form, which is the
    name the attribute is stored under.
    """
    names: List[str] = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__"):
                continue
            if slot.startswith("__") and not slot.endswith("__"):
                slot = f"_{klass.__name__.lstrip('_')}{slot}"
            if slot not in names:
                names.append(slot)
    return names


def read_field(obj: Any, name: str) -> Any:
    """Read an attribute for display through a force-readable view.

    ``object.__getattribute__`` bypasses custom ``__getattribute__``
    hooks so private and proxied attributes show their stored value. If
    that fails the regular ``getattr`` path is tried, and if that fails
    too the field is reported as UNSET. Never mutates ``obj``.
    """
    try:
        return object.__getattribute__(obj, name)
    except Exception as exc:
        logger.debug("Direct read of %s.%s failed: %s", type_name(obj), name, exc)
    try:
        return getattr(obj, name)
    except Exception as exc:
        logger.debug("Field %s.%s is unreadable: %s", type_name(obj), name, exc)
        return UNSET


def _instance_dict(obj: Any) -> Dict[str, Any]:
    try:
        instance_dict = object.__getattribute__(obj, "__dict__")
    except (AttributeError, TypeError):
        return {}
    return instance_dict if isinstance(instance_dict, dict) else {}


def _field_name(key: Any) -> str:
    # __dict__ can be given non-str keys directly
    if isinstance(key, str):
        return key
    try:
        return str(key)
    except Exception:
        return object.__repr__(key)


def struct_fields(obj: Any) -> List[StructField]:
    """Enumerate the fields of a struct-like value in declaration order.

    Dataclasses report their fields (inherited ones first), named tuples
    their ``_fields``. Other objects report their ``__slots__`` from base
    to derived class, followed by the instance ``__dict__`` entries.
    """
    cls = type(obj)
    if is_dataclass_instance(obj):
        return [
            StructField(f.name, read_field(obj, f.name), annotation_name(f.type))
            for f in dataclasses.fields(obj)
        ]

    declared = declared_types(cls)
    if is_named_tuple(obj):
        return [
            StructField(name, read_field(obj, name), declared.get(name))
            for name in cls._fields
        ]

    fields: List[StructField] = []
    seen = set()
    for name in slot_names(cls):
        seen.add(name)
        fields.append(StructField(name, read_field(obj, name), declared.get(name)))
    for key, value in _instance_dict(obj).items():
        if key in seen:
            continue
        fields.append(StructField(_field_name(key), value, declared.get(key)))
    return fields


@functools.lru_cache(maxsize=512)
def has_custom_str(cls: type) -> bool:
    """Check whether a class provides its own ``__str__``.

    The class that defines ``__str__`` first in the MRO decides: builtin
    types and ``object`` do not count, anything else does.
    """
    for klass in cls.__mro__:
        if "__str__" in klass.__dict__:
            return klass is not object and klass.__module__ != "builtins"
    return False


def is_stringer(value: Any, kind: Kind) -> bool:
    """Check whether a value should be shown through its ``__str__``."""
    if kind in _NO_STRINGER_KINDS:
        return False
    return has_custom_str(type(value))


def callable_name(fn: Any) -> str:
    """Best display name for a callable."""
    if isinstance(fn, functools.partial):
        return f"partial({callable_name(fn.func)})"
    return (
        getattr(fn, "__qualname__", None)
        or getattr(fn, "__name__", None)
        or type_name(fn)
    )


def signature_text(fn: Any) -> str:
    """Signature of a callable, or ``(...)`` when it cannot be inspected."""
    try:
        return str(inspect.signature(fn))
    except (TypeError, ValueError):
        return "(...)"


def proxy_referent(proxy: Any) -> Any:
    """Object behind a weakref.proxy, or None when it has been collected.

    A proxy forwards attribute access, so a bound method fetched through
    it carries the referent as ``__self__``.
    """
    try:
        method = proxy.__reduce_ex__
    except ReferenceError:
        return None
    return getattr(method, "__self__", None)


def deref(ref: Any) -> Tuple[Any, int]:
    """Follow a chain of weak references and proxies.

    Returns:
        Tuple of (referent, number of layers followed). The referent is
        None when a reference in the chain is dead.
    """
    layers = 0
    value: Any = ref
    while True:
        if is_weak_proxy(value):
            value = proxy_referent(value)
        elif isinstance(value, weakref.ref):
            value = value()
        else:
            return value, layers
        layers += 1

# vardump/field_policy.py
"""Per-field include / exclude / redact decisions for struct rendering.

The policy is evaluated against each struct field name at render time
and is otherwise stateless, so one instance can be shared by any number
of concurrent renders.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable


class FieldMatchMode(Enum):
    """How a field name is compared against a candidate list."""
    EXACT = "exact"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    CONTAINS = "contains"


class FieldAction(Enum):
    """What to do with a struct field."""
    INCLUDE = "include"
    EXCLUDE = "exclude"
    REDACT = "redact"


# Lowercase substrings that mark a field as sensitive when default
# redaction is enabled.
SENSITIVE_FIELD_NAMES = (
    "password",
    "passwd",
    "secret",
    "token",
    "apikey",
    "api_key",
    "key",
    "credential",
)

REDACTED_PLACEHOLDER = "<redacted>"


def matches_any(name: str, candidates: Iterable[str], mode: FieldMatchMode) -> bool:
    """Check a field name against candidates under a match mode.

    Comparisons are case-sensitive. Empty candidates never match.
    """
    for candidate in candidates:
        if not candidate:
            continue
        if mode is FieldMatchMode.EXACT and name == candidate:
            return True
        if mode is FieldMatchMode.PREFIX and name.startswith(candidate):
            return True
        if mode is FieldMatchMode.SUFFIX and name.endswith(candidate):
            return True
        if mode is FieldMatchMode.CONTAINS and candidate in name:
            return True
    return False


def is_sensitive_name(name: str) -> bool:
    """Check a field name against the built-in sensitive list, ignoring case."""
    lowered = name.lower()
    return any(marker in lowered for marker in SENSITIVE_FIELD_NAMES)


@dataclass(frozen=True)
class FieldPolicy:
    """Field filtering and redaction rules.

    Attributes:
        only_names: When non-empty, only these fields (exact match) render.
        exclude_names: Fields omitted entirely.
        exclude_match_mode: Match mode for exclude_names.
        redact_names: Fields whose value is replaced by a placeholder.
        redact_match_mode: Match mode for redact_names.
        redact_sensitive_defaults: Also redact fields that look sensitive
            (password, token, key, ...).
    """
    only_names: FrozenSet[str] = field(default_factory=frozenset)
    exclude_names: FrozenSet[str] = field(default_factory=frozenset)
    exclude_match_mode: FieldMatchMode = FieldMatchMode.EXACT
    redact_names: FrozenSet[str] = field(default_factory=frozenset)
    redact_match_mode: FieldMatchMode = FieldMatchMode.EXACT
    redact_sensitive_defaults: bool = False

    def decide(self, name: str) -> FieldAction:
        """Decide how a field with the given name is rendered."""
        if self.only_names and name not in self.only_names:
            return FieldAction.EXCLUDE
        if matches_any(name, self.exclude_names, self.exclude_match_mode):
            return FieldAction.EXCLUDE
        if matches_any(name, self.redact_names, self.redact_match_mode):
            return FieldAction.REDACT
        if self.redact_sensitive_defaults and is_sensitive_name(name):
            return FieldAction.REDACT
        return FieldAction.INCLUDE

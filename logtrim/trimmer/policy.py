"""
LimitPolicy - the caps and ignore rules governing one trim invocation.

A policy is built fresh per call from the defaults and the caller's
options, applied in order. Options are plain callables that take a
policy and return a new one; the policy itself is never mutated.
"""

from dataclasses import dataclass, field, replace
from typing import Callable, FrozenSet

from logtrim.shared.constants import (
    DEFAULT_ARRAY_LIMIT,
    DEFAULT_DEPTH_LIMIT,
    DEFAULT_STRING_LIMIT,
    DEFAULT_WHOLE_LIMIT,
)


@dataclass(frozen=True)
class LimitPolicy:
    """Immutable trim limits.

    whole_limit is accepted and carried for compatibility with callers
    that configure it, but no traversal step enforces it.
    """
    array_limit: int = DEFAULT_ARRAY_LIMIT
    string_limit: int = DEFAULT_STRING_LIMIT
    depth_limit: int = DEFAULT_DEPTH_LIMIT
    whole_limit: int = DEFAULT_WHOLE_LIMIT
    ignores: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_options(cls, *opts: "TrimOption") -> "LimitPolicy":
        """Apply options in order over the default policy."""
        policy = cls()
        for opt in opts:
            policy = opt(policy)
        return policy


TrimOption = Callable[[LimitPolicy], LimitPolicy]


def _check_limit(name: str, limit) -> int:
    # bool is an int subclass but never a meaningful limit
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise TypeError(f"{name} must be an int, got {type(limit).__name__}")
    return limit


def with_array_limit(limit: int) -> TrimOption:
    """Keep at most `limit` elements of any sequence."""
    limit = _check_limit("array limit", limit)
    return lambda p: replace(p, array_limit=limit)


def with_string_limit(limit: int) -> TrimOption:
    """Truncate strings to `limit` characters. Non-positive disables truncation."""
    limit = _check_limit("string limit", limit)
    return lambda p: replace(p, string_limit=limit)


def with_depth_limit(limit: int) -> TrimOption:
    """Traverse at most `limit` record/mapping levels."""
    limit = _check_limit("depth limit", limit)
    return lambda p: replace(p, depth_limit=limit)


def with_whole_limit(limit: int) -> TrimOption:
    limit = _check_limit("whole limit", limit)
    return lambda p: replace(p, whole_limit=limit)


def with_ignores(*ignores: str) -> TrimOption:
    """Hide the given field/key names. Replaces any previously set names."""
    names = frozenset(str(n) for n in ignores)
    return lambda p: replace(p, ignores=names)

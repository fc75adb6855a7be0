"""
Structural traversal for the trimmer.

Values are classified into a closed set of kinds (scalar, record,
mapping, sequence, other) and each kind has its own traverser. Depth
is spent at record and mapping boundaries only; sequences pass their
budget through to their elements unchanged.
"""

import dataclasses
import io
import types
import weakref
from collections.abc import Mapping, Sequence, Set
from enum import Enum
from itertools import islice
from typing import Any, Iterator, Optional

from pydantic import BaseModel

from logtrim.shared.constants import SIZE_KEY_PREFIX
from .policy import LimitPolicy
from .scalars import (
    UNSUPPORTED,
    is_non_valuable,
    scalar_value,
    special_value,
    unwrap,
    visible_name,
)

_OPAQUE_TYPES = (
    type,
    types.ModuleType,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
    io.IOBase,
)

_TEXT_TYPES = (str, bytes, bytearray, memoryview)


class ValueKind(Enum):
    """Shape of a value as seen by the dispatcher."""
    SCALAR = "scalar"
    RECORD = "record"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    OTHER = "other"


def _is_namedtuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def classify(value: Any) -> ValueKind:
    """Classify an already unwrapped, non-scalar value."""
    if isinstance(value, _OPAQUE_TYPES):
        return ValueKind.OTHER
    if isinstance(value, BaseModel) or dataclasses.is_dataclass(value):
        return ValueKind.RECORD
    if _is_namedtuple(value):
        return ValueKind.RECORD
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, _TEXT_TYPES):
        return ValueKind.OTHER
    if isinstance(value, (Sequence, Set)):
        return ValueKind.SEQUENCE
    if callable(value):
        return ValueKind.OTHER
    if hasattr(value, "__dict__") or _slot_names(type(value)):
        return ValueKind.RECORD
    return ValueKind.OTHER


def _slot_names(cls: type) -> list[str]:
    names = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in ("__dict__", "__weakref__") and name not in names:
                names.append(name)
    return names


def _tagged_name(name: str, tag: Optional[str]) -> Optional[str]:
    """Apply a serialization tag to a field name. None means never emit."""
    if not tag:
        return name
    if tag == "-":
        return None
    tag = tag.split(",", 1)[0]
    return tag or name


def record_fields(value: Any) -> Iterator[tuple[str, Any]]:
    """Yield (emitted key, field value) pairs in declaration order.

    Excluded fields and private (underscore) attributes are never yielded.
    """
    if isinstance(value, BaseModel):
        for name, info in type(value).model_fields.items():
            if info.exclude:
                continue
            key = info.serialization_alias or info.alias or name
            yield key, getattr(value, name, None)
        return

    if dataclasses.is_dataclass(value):
        for f in dataclasses.fields(value):
            if f.name.startswith("_"):
                continue
            key = _tagged_name(f.name, f.metadata.get("json"))
            if key is None:
                continue
            yield key, getattr(value, f.name, None)
        return

    if _is_namedtuple(value):
        yield from zip(value._fields, value)
        return

    seen = set()
    for name, attr in getattr(value, "__dict__", {}).items():
        if not name.startswith("_"):
            seen.add(name)
            yield name, attr
    for name in _slot_names(type(value)):
        if not name.startswith("_") and name not in seen:
            yield name, getattr(value, name, None)


class Trimmer:
    """Walks one value under a fixed LimitPolicy. Holds no other state."""

    def __init__(self, policy: LimitPolicy):
        self._policy = policy

    @property
    def policy(self) -> LimitPolicy:
        return self._policy

    def resolve(self, value: Any) -> tuple[Optional[ValueKind], Any]:
        """Classify a value, rendering scalars on the way.

        Returns (SCALAR, bounded value) for scalars, (kind, unwrapped value)
        for containers, and (None, None) for values that are dropped.
        """
        if is_non_valuable(value):
            return None, None

        val = scalar_value(value, self._policy.string_limit)
        if val is not UNSUPPORTED:
            return ValueKind.SCALAR, val

        value = unwrap(value)
        # a reference to a reference should not happen
        if is_non_valuable(value) or isinstance(value, weakref.ref):
            return None, None

        val = special_value(value, self._policy.string_limit)
        if val is not UNSUPPORTED:
            return ValueKind.SCALAR, val

        kind = classify(value)
        if kind is ValueKind.OTHER:
            return None, None
        return kind, value

    def trim(self, value: Any, depth: int) -> Any:
        """Dispatcher: the recursive entry point."""
        kind, value = self.resolve(value)
        if kind is ValueKind.SCALAR:
            return value
        if kind is ValueKind.RECORD:
            return self.trim_record(value, depth - 1)
        if kind is ValueKind.MAPPING:
            return self.trim_mapping(value, depth - 1)
        if kind is ValueKind.SEQUENCE:
            return self.trim_sequence(value, depth)
        return None

    def trim_record(self, value: Any, depth: int) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if depth <= 0:
            return out

        for key, field_value in record_fields(value):
            if not visible_name(key, self._policy.ignores):
                continue

            kind, fv = self.resolve(field_value)
            if kind is None:
                continue
            if kind is ValueKind.SCALAR:
                out[key] = fv
            elif kind is ValueKind.RECORD:
                nested = self.trim_record(fv, depth - 1)
                if nested:
                    out[key] = nested
            elif kind is ValueKind.MAPPING:
                nested = self.trim_mapping(fv, depth - 1)
                if nested:
                    out[key] = nested
            elif kind is ValueKind.SEQUENCE:
                items = self.trim_sequence(fv, depth)
                if items:
                    out[key] = items
                    out[SIZE_KEY_PREFIX + key] = len(fv)

        return out

    def trim_mapping(self, value: Mapping, depth: int) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if depth <= 0:
            return out

        for k, v in value.items():
            key = str(k)
            if not visible_name(key, self._policy.ignores):
                continue

            kind, fv = self.resolve(v)
            if kind is None:
                continue
            if kind is ValueKind.SCALAR:
                out[key] = fv
            elif kind is ValueKind.RECORD:
                out[key] = self.trim_record(fv, depth - 1)
            elif kind is ValueKind.MAPPING:
                out[key] = self.trim_mapping(fv, depth - 1)
            elif kind is ValueKind.SEQUENCE:
                out[key] = self.trim_sequence(fv, depth)

        return out

    def trim_sequence(self, value: Any, depth: int) -> list[Any]:
        out: list[Any] = []
        limit = max(self._policy.array_limit, 0)

        for element in islice(value, limit):
            kind, ev = self.resolve(element)
            if kind is None:
                continue
            if kind is ValueKind.SCALAR:
                out.append(ev)
            elif kind is ValueKind.RECORD:
                out.append(self.trim_record(ev, depth - 1))
            elif kind is ValueKind.MAPPING:
                out.append(self.trim_mapping(ev, depth - 1))
            # sequence of sequences: the inner sequence is dropped

        return out

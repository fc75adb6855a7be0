"""
Scalar classification for the trimmer.

Special types (text, raw bytes, exceptions, timestamps, durations,
decimals, enum members) are rendered first, then plain primitives.
Anything neither recognizes is left to the traversers.
"""

import numbers
import weakref
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Collection

from logtrim.shared.constants import ELLIPSIS, INTERNAL_FIELD_PREFIX, TIME_FORMAT

# Returned when a value is not a scalar of the asked-for family.
UNSUPPORTED = object()

_BYTES_TYPES = (bytes, bytearray, memoryview)


def string_limit(s: str, limit: int) -> str:
    """Truncate s to at most `limit` characters, appending an ellipsis.

    A non-positive limit disables truncation.
    """
    if limit <= 0:
        return s
    if len(s) > limit:
        return s[:limit] + ELLIPSIS
    return s


def visible_name(name: str, ignores: Collection[str]) -> bool:
    """Return False for ignored names and protobuf bookkeeping fields."""
    if ignores and name in ignores:
        return False
    # skip proto unknown fields
    return not name.startswith(INTERNAL_FIELD_PREFIX)


def is_non_valuable(value: Any) -> bool:
    """True for values that carry nothing worth logging."""
    if value is None:
        return True
    if isinstance(value, weakref.ref) and value() is None:
        return True
    return False


def unwrap(value: Any) -> Any:
    """Unwrap exactly one level of indirection."""
    if isinstance(value, weakref.ref):
        return value()
    return value


def format_time(value: datetime) -> str:
    return f"{value.strftime(TIME_FORMAT)}.{value.microsecond // 1000:03d}"


def _fraction(value: int, digits: int) -> str:
    whole, frac = divmod(value, 10 ** digits)
    if not frac:
        return str(whole)
    return f"{whole}.{frac:0{digits}d}".rstrip("0")


def format_duration(delta: timedelta) -> str:
    """Render a duration in its canonical short form, e.g. 1h2m3.5s or 1.5ms."""
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_fraction(micros, 3)}ms"

    hours, rem = divmod(micros, 3_600_000_000)
    minutes, rem = divmod(rem, 60_000_000)
    out = f"{_fraction(rem, 6)}s"
    if hours or minutes:
        out = f"{minutes}m{out}"
    if hours:
        out = f"{hours}h{out}"
    return sign + out


def special_value(value: Any, str_limit: int) -> Any:
    """Render the fixed set of special types, or return UNSUPPORTED.

    Runs ahead of record handling: exceptions, timestamps and enum
    members are objects internally and must never be traversed.
    """
    if is_non_valuable(value):
        return UNSUPPORTED

    # str- and int-mixin members must render as their plain value
    if isinstance(value, Enum):
        val = primary_value(value.value, str_limit)
        return value.name if val is UNSUPPORTED else val
    if isinstance(value, str):
        return string_limit(str.__str__(value), str_limit)
    if isinstance(value, _BYTES_TYPES):
        return string_limit(bytes(value).decode("utf-8", errors="replace"), str_limit)
    if isinstance(value, BaseException):
        return str(value)
    # datetime is a date subclass, check it first
    if isinstance(value, datetime):
        return format_time(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.isoformat(timespec="milliseconds")
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, Decimal):
        return str(value)

    return UNSUPPORTED


def primary_value(value: Any, str_limit: int) -> Any:
    """Return the bounded value of a primitive (or a reference to one), or UNSUPPORTED."""
    if is_non_valuable(value):
        return UNSUPPORTED

    value = unwrap(value)

    if isinstance(value, bool):
        return value
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, numbers.Complex):
        return complex(value)
    if isinstance(value, str):
        return string_limit(str.__str__(value), str_limit)

    return UNSUPPORTED


def scalar_value(value: Any, str_limit: int) -> Any:
    """Special types first, then primitives."""
    val = special_value(value, str_limit)
    if val is not UNSUPPORTED:
        return val
    return primary_value(value, str_limit)

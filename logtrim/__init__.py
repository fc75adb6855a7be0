"""logtrim - bounded, loggable representations of arbitrary values."""

from logtrim.trimmer.api import (
    json_object_with_opts,
    trim_object,
    trim_object_with_opts,
)
from logtrim.trimmer.policy import (
    LimitPolicy,
    with_array_limit,
    with_depth_limit,
    with_ignores,
    with_string_limit,
    with_whole_limit,
)

__all__ = [
    "LimitPolicy",
    "json_object_with_opts",
    "trim_object",
    "trim_object_with_opts",
    "with_array_limit",
    "with_depth_limit",
    "with_ignores",
    "with_string_limit",
    "with_whole_limit",
]

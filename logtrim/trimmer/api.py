"""
Public trim API.

Every entry point always returns a value and never raises: a fault
anywhere in the traversal is caught here, once, and the whole result
degrades to a single string describing the fault.
"""

import json
import logging
from typing import Any

from .policy import LimitPolicy, TrimOption
from .traversal import Trimmer

logger = logging.getLogger(__name__)


def trim_object(obj: Any) -> Any:
    """Trim with the default limits."""
    return trim_object_with_opts(obj)


def trim_object_with_opts(obj: Any, *opts: TrimOption) -> Any:
    """
    Convert obj into a depth-, breadth- and length-bounded tree of
    None / bool / int / float / complex / str / list / dict.
    Options are applied in order over the defaults.
    """
    try:
        policy = LimitPolicy.from_options(*opts)
        return Trimmer(policy).trim(obj, policy.depth_limit)
    except Exception as e:
        logger.error(f"Trim fault recovered: {e!r}", exc_info=True)
        return f"trim fault recovered: {e!r}"


def json_object_with_opts(obj: Any, *opts: TrimOption) -> str:
    """Trim obj, then serialize it to compact JSON. Returns "" if serialization fails."""
    try:
        return json.dumps(
            trim_object_with_opts(obj, *opts),
            ensure_ascii=False,
            allow_nan=False,
            sort_keys=True,
            separators=(",", ":"),
        )
    except (TypeError, ValueError):
        return ""

"""
Named constants for the trimmer and the log sinks.

All default limits and field names live here so the trimmer, the
configuration loader and the sinks agree on them.
"""

# ── Trim limits ──────────────────────────────────────────────

DEFAULT_ARRAY_LIMIT = 3
"""Maximum number of elements kept from any single sequence."""

DEFAULT_STRING_LIMIT = 128
"""Maximum characters kept from any single string before the ellipsis."""

DEFAULT_DEPTH_LIMIT = 10
"""Maximum number of record/mapping levels traversed."""

DEFAULT_WHOLE_LIMIT = 4096
"""Whole-payload size cap. Carried on the policy, not enforced."""

ELLIPSIS = "..."
"""Marker appended to truncated strings."""

SIZE_KEY_PREFIX = "_size__"
"""Prefix of the companion key holding a truncated sequence's true length."""

INTERNAL_FIELD_PREFIX = "XXX_"
"""Reserved prefix of protocol-buffer bookkeeping fields, never emitted."""

TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
"""Timestamp layout; milliseconds are appended as '.mmm'."""

# ── Log policies ─────────────────────────────────────────────

DEFAULT_RATE = 10.0
"""Fallback token refill rate (records per second) for rate limiting."""

DEFAULT_BURST = 1
"""Fallback bucket size for rate limiting."""

DEFAULT_SAMPLE_RATIO = 0.1
"""Fallback ratio for sampling."""

# ── Log records ──────────────────────────────────────────────

DEFAULT_SEPARATOR = "|"
"""Separator between the parts of a log message."""

DEFAULT_FIELD_NAME = "-"
"""Field key used by LogEntry.with_()."""

DEFAULT_ERR_FIELD_NAME = "err"
"""Field key used by LogEntry.with_error()."""

DEFAULT_TRACE_OCCUPY = "-:-:-"
"""Placeholder written when no request id is bound."""

DEFAULT_FIELD_OCCUPIED = "-"
"""Placeholder for empty traffic message parts."""

DEFAULT_DATA_LEVEL_NAME = "DATA"
"""Leading tag of every traffic log line."""

DEFAULT_REQ_FIELD_NAME = "request"
DEFAULT_RESP_FIELD_NAME = "response"
DEFAULT_PAIR_FIELD_NAME = "pair_id"

DEFAULT_TRAFFIC_LOGGER_NAME = "logtrim.traffic"
"""Logger that receives traffic records unless configured otherwise."""

"""
Structured log entry.

LogEntry wraps a stdlib logger and attaches bounded fields to every
record. Field values that are not plain scalars go through the
trimmer, so a large payload can never blow up a log line.
"""

import logging
from typing import Any, Iterable, Optional

from logtrim.shared.constants import (
    DEFAULT_ERR_FIELD_NAME,
    DEFAULT_FIELD_NAME,
    DEFAULT_SEPARATOR,
    DEFAULT_TRACE_OCCUPY,
)
from logtrim.trimmer.api import trim_object_with_opts
from logtrim.trimmer.policy import with_ignores
from .setup import request_id_ctx

_PASS_THROUGH = (str, bool, int, float)


def _sprintf(fmt: str, args: tuple) -> str:
    """%-format like logging does, without raising on a bad format."""
    if not args:
        return fmt
    try:
        return fmt % args
    except (TypeError, ValueError, KeyError) as e:
        return f"{fmt} (format error: {e}; args={args!r})"


def to_log_fields(fields: Optional[dict], ignores: Iterable[str] = ()) -> dict[str, Any]:
    """Convert field values to loggable form.

    Strings, numbers and None pass through unchanged; everything else is
    trimmed with the given ignore names.
    """
    if not fields:
        return {}
    ignores = tuple(ignores)
    out: dict[str, Any] = {}
    for key, value in fields.items():
        if value is None or type(value) in _PASS_THROUGH:
            out[key] = value
        else:
            out[key] = trim_object_with_opts(value, with_ignores(*ignores))
    return out


class LogEntry:
    """
    Immutable structured logger.

    with_* methods return new entries; fields bound to an entry are
    trimmed once at bind time and attached to every record it emits.
    """

    def __init__(
        self,
        logger: logging.Logger,
        fields: Optional[dict] = None,
        request_id: str = "",
    ):
        self._logger = logger
        self._fields: dict[str, Any] = dict(fields or {})
        self._request_id = request_id

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self._fields)

    @property
    def request_id(self) -> str:
        return self._request_id

    # ── Levels ───────────────────────────────────────────────

    def enabled(self, level: int) -> bool:
        if level not in (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR):
            return False
        return self._logger.isEnabledFor(level)

    def debug(self, msg: str) -> None:
        self._emit(logging.DEBUG, msg)

    def debugf(self, fmt: str, *args: Any) -> None:
        if self.enabled(logging.DEBUG):
            self._emit(logging.DEBUG, _sprintf(fmt, args))

    def debug_with(self, msg: str, fields: Optional[dict]) -> None:
        self._emit(logging.DEBUG, msg, fields)

    def info(self, msg: str) -> None:
        self._emit(logging.INFO, msg)

    def infof(self, fmt: str, *args: Any) -> None:
        if self.enabled(logging.INFO):
            self._emit(logging.INFO, _sprintf(fmt, args))

    def info_with(self, msg: str, fields: Optional[dict]) -> None:
        self._emit(logging.INFO, msg, fields)

    def warn(self, msg: str) -> None:
        self._emit(logging.WARNING, msg)

    def warnf(self, fmt: str, *args: Any) -> None:
        if self.enabled(logging.WARNING):
            self._emit(logging.WARNING, _sprintf(fmt, args))

    def warn_with(self, msg: str, fields: Optional[dict]) -> None:
        self._emit(logging.WARNING, msg, fields)

    def error(self, msg: str) -> None:
        self._emit(logging.ERROR, msg)

    def errorf(self, fmt: str, *args: Any) -> None:
        if self.enabled(logging.ERROR):
            self._emit(logging.ERROR, _sprintf(fmt, args))

    def error_with(self, msg: str, fields: Optional[dict]) -> None:
        self._emit(logging.ERROR, msg, fields)

    # ── Binding ──────────────────────────────────────────────

    def with_fields(self, fields: Optional[dict]) -> "LogEntry":
        merged = dict(self._fields)
        merged.update(to_log_fields(fields))
        return LogEntry(self._logger, merged, self._request_id)

    def with_field(self, key: str, value: Any) -> "LogEntry":
        return self.with_fields({key: value})

    def with_(self, data: Any) -> "LogEntry":
        """Bind data under the default field name."""
        return self.with_field(DEFAULT_FIELD_NAME, data)

    def with_error(self, err: BaseException) -> "LogEntry":
        return self.with_field(DEFAULT_ERR_FIELD_NAME, err)

    def with_tracing(self, request_id: str) -> "LogEntry":
        return LogEntry(self._logger, self._fields, request_id)

    # ── Internals ────────────────────────────────────────────

    def _with_trace(self, msg: str) -> str:
        request_id = self._request_id
        if not request_id:
            ctx_id = request_id_ctx.get("-")
            request_id = ctx_id if ctx_id != "-" else DEFAULT_TRACE_OCCUPY
        return DEFAULT_SEPARATOR.join([request_id, msg])

    def _emit(self, level: int, msg: str, fields: Optional[dict] = None) -> None:
        if not self.enabled(level):
            return
        record_fields = dict(self._fields)
        record_fields.update(to_log_fields(fields))
        self._logger.log(level, self._with_trace(msg), extra={"fields": record_fields})


def get_entry(name: Optional[str] = None) -> LogEntry:
    """Return a LogEntry over logging.getLogger(name)."""
    return LogEntry(logging.getLogger(name))

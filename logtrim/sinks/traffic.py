"""
Traffic recording - request/response exchanges as structured log lines.

Each line reads DATA|<request id>|<typ>|<cmd>|<cost>|<code>|<msg> and
carries the trimmed request and response payloads as fields. Entries
are immutable; with_* methods return configured copies. The entry in
use can be propagated through a ContextVar.
"""

import contextvars
import logging
import time
import uuid
from contextlib import contextmanager
from datetime import timedelta
from typing import Any, Iterator, Optional

from logtrim.shared.constants import (
    DEFAULT_DATA_LEVEL_NAME,
    DEFAULT_FIELD_OCCUPIED,
    DEFAULT_PAIR_FIELD_NAME,
    DEFAULT_REQ_FIELD_NAME,
    DEFAULT_RESP_FIELD_NAME,
    DEFAULT_SEPARATOR,
    DEFAULT_TRACE_OCCUPY,
    DEFAULT_TRAFFIC_LOGGER_NAME,
)
from logtrim.shared.interfaces import ILogPolicy, ITrafficEntry
from logtrim.shared.models import Traffic, TrafficRequest, TrafficType
from logtrim.trimmer.scalars import format_duration
from .entry import to_log_fields

logger = logging.getLogger(__name__)


def convert_to_message(traffic: Optional[Traffic], separator: str) -> str:
    """Render typ|cmd|cost|code|msg. Requests have no cost or code yet."""
    if traffic is None:
        return ""

    typ = traffic.typ.value if traffic.typ else DEFAULT_FIELD_OCCUPIED
    is_request = traffic.typ is not None and traffic.typ.is_request

    return separator.join([
        typ,
        traffic.cmd or DEFAULT_FIELD_OCCUPIED,
        DEFAULT_FIELD_OCCUPIED if is_request else format_duration(traffic.cost),
        DEFAULT_FIELD_OCCUPIED if is_request else str(traffic.code),
        traffic.msg or DEFAULT_FIELD_OCCUPIED,
    ])


class NullTrafficEntry(ITrafficEntry):
    """Drops everything."""

    def data(self, traffic: Traffic) -> None:
        pass

    def data_with(self, traffic: Traffic, fields: Optional[dict]) -> None:
        pass

    def start(self, request: TrafficRequest, fields: Optional[dict] = None):
        return None

    def with_fields(self, fields: dict) -> "NullTrafficEntry":
        return self

    def with_tracing(self, request_id: str) -> "NullTrafficEntry":
        return self

    def with_ignores(self, *ignores: str) -> "NullTrafficEntry":
        return self

    def with_policy(self, policy: ILogPolicy) -> "NullTrafficEntry":
        return self


class TrafficEntry(ITrafficEntry):
    """Logs exchanges to a stdlib logger at INFO."""

    def __init__(
        self,
        data_logger: Optional[logging.Logger] = None,
        separator: str = DEFAULT_SEPARATOR,
        request_id: str = "",
        ignores: tuple = (),
        fields: Optional[dict] = None,
        allow: bool = True,
    ):
        self._logger = data_logger or logging.getLogger(DEFAULT_TRAFFIC_LOGGER_NAME)
        self._sep = separator
        self._request_id = request_id
        self._ignores = tuple(ignores)
        self._fields: dict[str, Any] = dict(fields or {})
        self._allow = allow

    @property
    def allowed(self) -> bool:
        return self._allow

    @property
    def ignores(self) -> tuple:
        return self._ignores

    @property
    def request_id(self) -> str:
        return self._request_id

    def data(self, traffic: Traffic) -> None:
        self.data_with(traffic, None)

    def data_with(self, traffic: Traffic, fields: Optional[dict]) -> None:
        if traffic is None or not self._allow:
            return

        new_fields = dict(fields or {})
        if traffic.req is not None:
            new_fields[DEFAULT_REQ_FIELD_NAME] = traffic.req
        if traffic.resp is not None:
            new_fields[DEFAULT_RESP_FIELD_NAME] = traffic.resp

        record_fields = dict(self._fields)
        record_fields.update(to_log_fields(new_fields, self._ignores))
        self._logger.info(
            self._with_meta(convert_to_message(traffic, self._sep)),
            extra={"fields": record_fields},
        )

    def start(self, request: TrafficRequest, fields: Optional[dict] = None) -> Optional["TrafficRecord"]:
        """Log the request half of an exchange and return its record."""
        if request is None or not self._allow:
            return None

        pair_id = uuid.uuid4().hex
        fields = dict(fields or {})
        fields[DEFAULT_PAIR_FIELD_NAME] = pair_id
        self.data_with(Traffic(typ=TrafficType.REQ, cmd=request.cmd, req=request.req), fields)
        return TrafficRecord(self, request.cmd, pair_id)

    def with_fields(self, fields: dict) -> "TrafficEntry":
        merged = dict(self._fields)
        merged.update(to_log_fields(fields))
        return self._copy(fields=merged)

    def with_tracing(self, request_id: str) -> "TrafficEntry":
        return self._copy(request_id=request_id)

    def with_ignores(self, *ignores: str) -> "TrafficEntry":
        return self._copy(ignores=tuple(ignores))

    def with_policy(self, policy: Optional[ILogPolicy]) -> "TrafficEntry":
        """The policy is asked once, now; the copy keeps its answer."""
        if policy is None:
            return self
        return self._copy(allow=policy.allow())

    def _copy(self, **overrides: Any) -> "TrafficEntry":
        state = {
            "data_logger": self._logger,
            "separator": self._sep,
            "request_id": self._request_id,
            "ignores": self._ignores,
            "fields": self._fields,
            "allow": self._allow,
        }
        state.update(overrides)
        return TrafficEntry(**state)

    def _with_meta(self, msg: str) -> str:
        request_id = self._request_id or DEFAULT_TRACE_OCCUPY
        return self._sep.join([DEFAULT_DATA_LEVEL_NAME, request_id, msg])


class TrafficRecord:
    """The open half of an exchange started with TrafficEntry.start()."""

    def __init__(self, entry: TrafficEntry, cmd: str, pair_id: str):
        self._entry = entry
        self._cmd = cmd
        self._pair_id = pair_id
        self._started = time.monotonic()

    @property
    def pair_id(self) -> str:
        return self._pair_id

    def elapsed(self) -> timedelta:
        return timedelta(seconds=time.monotonic() - self._started)

    def end(self, resp: Any = None, code: int = 0, msg: str = "", fields: Optional[dict] = None) -> None:
        """Log the response half, paired with the request by pair_id."""
        fields = dict(fields or {})
        fields[DEFAULT_PAIR_FIELD_NAME] = self._pair_id
        self._entry.data_with(
            Traffic(
                typ=TrafficType.REQUEST_RESP,
                cmd=self._cmd,
                code=code,
                msg=msg,
                cost=self.elapsed(),
                resp=resp,
            ),
            fields,
        )


# ── Context propagation ──────────────────────────────────────────────────────

_traffic_entry_ctx: contextvars.ContextVar[Optional[ITrafficEntry]] = contextvars.ContextVar(
    "traffic_entry", default=None
)
_default_entry = TrafficEntry()


def traffic_entry_from_context() -> ITrafficEntry:
    """The entry bound to the current context, or the default entry."""
    entry = _traffic_entry_ctx.get()
    if entry is None:
        return _default_entry
    return entry


def set_default_traffic_entry(entry: TrafficEntry) -> None:
    """Replace the entry used when the context has none bound."""
    global _default_entry
    _default_entry = entry
    logger.debug("Default traffic entry replaced")


@contextmanager
def use_traffic_entry(entry: ITrafficEntry) -> Iterator[ITrafficEntry]:
    """Bind entry to the current context for the duration of the block."""
    token = _traffic_entry_ctx.set(entry)
    try:
        yield entry
    finally:
        _traffic_entry_ctx.reset(token)


def data(traffic: Traffic, fields: Optional[dict] = None) -> None:
    """Log traffic through the entry bound to the current context."""
    traffic_entry_from_context().data_with(traffic, fields)


def start_traffic(request: TrafficRequest, fields: Optional[dict] = None) -> Optional[TrafficRecord]:
    return traffic_entry_from_context().start(request, fields)

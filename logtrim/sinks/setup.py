"""
stdlib logging configuration for logtrim sinks.

Installs a formatter that renders a record's structured fields as
compact JSON after the message, and a filter that stamps the current
request id (held in a ContextVar) on every record.
"""

import contextvars
import json
import logging
import sys
from typing import Optional

from logtrim.shared.config import LoggingConfig

logger = logging.getLogger(__name__)

# ── Request ID tracking via ContextVar ────────────────────────────────────────
request_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")


def set_request_id(request_id: str) -> contextvars.Token:
    """Bind a request id to the current context. Returns a token for reset."""
    return request_id_ctx.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    request_id_ctx.reset(token)


class RequestIDFilter(logging.Filter):
    """Injects the current request ID into every log record."""
    def filter(self, record):
        record.request_id = request_id_ctx.get("-")
        return True


class FieldsFormatter(logging.Formatter):
    """Appends `record.fields` (already trimmed) as compact JSON."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_ctx.get("-")
        text = super().format(record)
        fields = getattr(record, "fields", None)
        if not fields:
            return text
        try:
            encoded = json.dumps(
                fields, ensure_ascii=False, default=str, separators=(",", ":")
            )
        except (TypeError, ValueError):
            encoded = str(fields)
        return f"{text} {encoded}"


def configure_logging(config: LoggingConfig, stream: Optional[object] = None) -> logging.Logger:
    """
    Configure the root logger with the fields formatter and request id filter.
    Returns the traffic logger named by the configuration.
    """
    log_level = getattr(logging, config.log_level, logging.INFO)
    rid_filter = RequestIDFilter()
    formatter = FieldsFormatter(config.log_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicate logs on reconfiguration
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console = logging.StreamHandler(stream or sys.stderr)
    console.setLevel(log_level)
    console.setFormatter(formatter)
    console.addFilter(rid_filter)
    root_logger.addHandler(console)

    traffic_logger = logging.getLogger(config.traffic_logger_name)
    # Traffic records are always INFO; keep them even when the root is quieter
    traffic_logger.setLevel(logging.INFO)
    logger.info(f"Logging configured at {config.log_level}")
    return traffic_logger

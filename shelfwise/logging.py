"""
Structured logging for the API.

Every record goes out as one JSON object carrying the request id and the
active trace/span ids. Services log dicts (``{"event": ..., ...}``) which are
merged into the top level of the JSON line so lifecycle events can be
filtered by ``event`` and ``item_id``.
"""
import logging
import json
import os
from typing import Any, Dict, Mapping
from opentelemetry.trace import get_current_span


SENSITIVE_KEYS = {"password", "secret", "token", "authorization", "api_key", "external_credentials"}
REDACTED = "[REDACTED]"


def current_request_id() -> str:
    try:
        from flask import g, has_request_context
        if not has_request_context():
            return "n/a"
        return getattr(g, "request_id", None) or "n/a"
    except Exception:
        return "n/a"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id()
        return True


def current_trace_ids():
    try:
        ctx = get_current_span().get_span_context()
    except Exception:
        return "n/a", "n/a"
    if not ctx or not ctx.is_valid:
        return "n/a", "n/a"
    return format(ctx.trace_id, "032x"), format(ctx.span_id, "016x")


class TraceIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id, record.span_id = current_trace_ids()
        return True


def mask(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Redact sensitive keys, descending into nested mappings."""
    out = {}
    for key, value in data.items():
        if str(key).lower() in SENSITIVE_KEYS:
            out[key] = REDACTED
        elif isinstance(value, Mapping):
            out[key] = mask(value)
        else:
            out[key] = value
    return out


class MaskingFilter(logging.Filter):
    """Masks dict payloads unless this is a DEBUG record outside production."""

    def filter(self, record: logging.LogRecord) -> bool:
        production = os.getenv("APP_ENV", "development").lower() == "production"
        if record.levelno == logging.DEBUG and not production:
            return True
        if isinstance(record.msg, Mapping):
            record.msg = mask(record.msg)
        if isinstance(record.args, Mapping):
            record.args = mask(record.args)
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        line = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "n/a"),
            "trace_id": getattr(record, "trace_id", "n/a"),
            "span_id": getattr(record, "span_id", "n/a"),
        }
        if isinstance(record.msg, Mapping):
            line.update(record.msg)
        else:
            line["message"] = record.getMessage()
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


def build_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z"))
    handler.addFilter(RequestIdFilter())
    handler.addFilter(TraceIdFilter())
    handler.addFilter(MaskingFilter())
    return handler


def configure_logging(app) -> None:
    handler = build_handler()

    level_name = os.getenv("LOG_LEVEL")
    if level_name:
        level = getattr(logging, level_name.upper(), logging.INFO)
    else:
        level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO

    app.logger.handlers.clear()
    app.logger.addHandler(handler)
    app.logger.setLevel(level)

    root = logging.getLogger()
    if not any(isinstance(h.formatter, JsonFormatter) for h in root.handlers):
        root.addHandler(handler)
    root.setLevel(level)

    for name in ("werkzeug", "sqlalchemy.engine"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.setLevel(level if name == "werkzeug" else logging.WARNING)

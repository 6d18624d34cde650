"""Structured Logging — JSON records for write-pipeline and query failures.

Invariants:
    - Every record carries timestamp (record creation time, UTC), level, logger, message
    - Invoice context (invoice_id, operation, error_code, path, rowcount) is emitted
      only when the caller attached it
    - setup_logging is idempotent: re-running it replaces the handler it installed
    - sqlalchemy.engine stays at WARNING unless the app runs at DEBUG

Design Decisions:
    - Context travels through `extra=` built by log_context(), not a LoggerAdapter:
      callers log from plain module loggers
    - LOG_FORMAT=text keeps one-line records for local runs and tests
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = ("invoice_id", "operation", "error_code", "path", "rowcount")

_HANDLER_NAME = "invoice-dashboard"


def log_context(operation: str, **fields) -> dict:
    """Build the `extra=` mapping for an invoice log record, dropping unset fields."""
    context = {"operation": operation, **fields}
    return {k: v for k, v in context.items() if k in CONTEXT_FIELDS and v is not None}


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, getattr(record, key))
            for key in CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the dashboard handler on the root logger."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        ))
    root.addHandler(handler)

    resolved = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(resolved)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if resolved <= logging.DEBUG else logging.WARNING,
    )
    return handler

"""Structured logging for ShelfMatch.

Every log line carries the request ID and tenant of the HTTP request that
produced it. Both live in context variables set by RequestContextMiddleware,
so code deep inside the matcher never has to pass them around.
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
org_id_var: ContextVar[Optional[str]] = ContextVar("org_id", default=None)

NO_REQUEST_ID = "no-request-id"

# Record attributes emitted as top-level JSON keys when set via `extra=`
EXTRA_FIELDS = (
    "outcome",
    "confidence",
    "score",
    "match_source",
    "query_type",
    "item_id",
    "candidate_count",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "error_type",
)


def generate_request_id() -> str:
    return str(uuid.uuid4())


def get_request_id() -> str:
    return request_id_var.get() or NO_REQUEST_ID


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def set_org_id(org_id: Optional[str]) -> None:
    org_id_var.set(org_id)


class RequestContextFilter(logging.Filter):
    """Stamp records with the current request ID and tenant.

    An explicit `extra={"org_id": ...}` wins over the context value, which
    matters for work done outside a request (scripts, tests).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        if getattr(record, "org_id", None) is None:
            record.org_id = org_id_var.get()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", NO_REQUEST_ID),
        }

        org_id = getattr(record, "org_id", None)
        if org_id is not None:
            payload["org_id"] = str(org_id)

        for name in EXTRA_FIELDS:
            if not hasattr(record, name):
                continue
            value = getattr(record, name)
            if value is None or isinstance(value, (bool, int, float)):
                payload[name] = value
            else:
                payload[name] = str(value)

        if record.exc_info:
            payload["error"] = str(record.exc_info[1])
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload)


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_format: JSON lines when True, plain text otherwise
    """
    log_level = getattr(logging, level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.addFilter(RequestContextFilter())
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s [%(request_id)s org=%(org_id)s] %(name)s: %(message)s"
        ))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(log_level)
    root.addHandler(handler)

    for noisy in ("uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

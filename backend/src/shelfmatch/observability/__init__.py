"""Logging, request context, Prometheus metrics and health checks."""

from .health import ComponentHealth, HealthStatus, check_database, check_schema, overall_status
from .logging_config import (
    configure_logging,
    generate_request_id,
    get_logger,
    get_request_id,
    set_org_id,
    set_request_id,
)
from .metrics import (
    aliases_learned_total,
    barcode_check_digit_total,
    match_confidence_total,
    match_duration_seconds,
    match_requests_total,
    match_score_histogram,
)
from .middleware import RequestContextMiddleware

__all__ = [
    "ComponentHealth",
    "HealthStatus",
    "check_database",
    "check_schema",
    "overall_status",
    "configure_logging",
    "generate_request_id",
    "get_logger",
    "get_request_id",
    "set_org_id",
    "set_request_id",
    "aliases_learned_total",
    "barcode_check_digit_total",
    "match_confidence_total",
    "match_duration_seconds",
    "match_requests_total",
    "match_score_histogram",
    "RequestContextMiddleware",
]

"""Health checks.

The matcher is only useful when the database answers and the catalog and
alias tables exist, so both are checked:

- database: SELECT 1 round trip (unhealthy on failure)
- schema: inventory_item, item_barcode and item_alias present
  (degraded when migrations have not been applied)
"""

import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, Optional

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .logging_config import get_logger

logger = get_logger(__name__)

REQUIRED_TABLES = ("inventory_item", "item_barcode", "item_alias")


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data


def check_database(db: Session) -> ComponentHealth:
    started = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {type(e).__name__}", exc_info=True)
        return ComponentHealth(HealthStatus.UNHEALTHY, f"Database unreachable: {type(e).__name__}")

    latency_ms = round((time.perf_counter() - started) * 1000, 2)
    return ComponentHealth(HealthStatus.HEALTHY, "Database reachable", latency_ms)


def check_schema(db: Session) -> ComponentHealth:
    try:
        existing = set(inspect(db.get_bind()).get_table_names())
    except SQLAlchemyError as e:
        logger.error(f"Schema inspection failed: {type(e).__name__}", exc_info=True)
        return ComponentHealth(HealthStatus.UNHEALTHY, f"Schema inspection failed: {type(e).__name__}")

    missing = [table for table in REQUIRED_TABLES if table not in existing]
    if missing:
        logger.warning(f"Matching tables missing: {', '.join(missing)}")
        return ComponentHealth(HealthStatus.DEGRADED, f"Missing tables: {', '.join(missing)}")
    return ComponentHealth(HealthStatus.HEALTHY, "Matching tables present")


def overall_status(components: Dict[str, ComponentHealth]) -> HealthStatus:
    """Worst component status wins."""
    statuses = {component.status for component in components.values()}
    for candidate in (HealthStatus.UNHEALTHY, HealthStatus.DEGRADED):
        if candidate in statuses:
            return candidate
    return HealthStatus.HEALTHY

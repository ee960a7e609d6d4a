"""Health and Prometheus metrics endpoints."""

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.orm import Session

from ..database import get_db
from .health import HealthStatus, check_database, check_schema, overall_status

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/health", summary="Database and schema health")
def health(db: Session = Depends(get_db)) -> JSONResponse:
    """Report component health.

    200 while healthy or degraded, 503 when the database is unreachable.
    """
    components = {"database": check_database(db)}
    if components["database"].status == HealthStatus.HEALTHY:
        components["schema"] = check_schema(db)

    current = overall_status(components)
    return JSONResponse(
        status_code=(
            status.HTTP_503_SERVICE_UNAVAILABLE
            if current == HealthStatus.UNHEALTHY
            else status.HTTP_200_OK
        ),
        content={
            "status": current.value,
            "components": {name: component.to_dict() for name, component in components.items()},
        },
    )

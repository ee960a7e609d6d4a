"""Request context middleware.

Binds the request ID (client-supplied X-Request-ID or a fresh UUID) and the
X-Org-ID tenant to the logging context, echoes the request ID back, and logs
one completion line per request.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging_config import generate_request_id, get_logger, set_org_id, set_request_id

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
ORG_ID_HEADER = "X-Org-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach request ID and tenant to every log line of a request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        set_request_id(request_id)
        set_org_id(request.headers.get(ORG_ID_HEADER))

        started = time.perf_counter()
        request_info = {"method": request.method, "path": request.url.path}

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"{request.method} {request.url.path} failed",
                extra={
                    **request_info,
                    "error_type": type(exc).__name__,
                    "duration_ms": _elapsed_ms(started),
                },
                exc_info=True
            )
            raise

        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                **request_info,
                "status_code": response.status_code,
                "duration_ms": _elapsed_ms(started),
            }
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)

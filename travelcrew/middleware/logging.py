"""
Travel Crew Backend — Request Logging Middleware
==================================================

What:  One access log line per request: method, path, status, duration,
       request ID and client IP.
How:   Log level follows the status code (5xx ERROR, 4xx WARNING, else INFO).
       Request bodies (form fields, image bytes) are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from travelcrew.middleware.request_id import request_id_var

logger = logging.getLogger("travelcrew.access")

# Polled by monitors every few seconds
QUIET_PATHS = {"/", "/api/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Typical durations:
        - GET /api/tours: 10-50ms (single collection query)
        - POST /api/tours: 500-3000ms (image upload dominates)
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        if path in QUIET_PATHS:
            return await call_next(request)

        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response

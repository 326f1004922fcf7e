"""
Registros API - Request Logging Middleware
===========================================

What:  One access log line per HTTP request, with status and duration.
How:   Measures time around call_next and logs on the `registros.access`
       logger, choosing the level from the status class:
       5xx → ERROR, 4xx → WARNING, everything else → INFO.

Logged: method, path, status, duration, request ID, client IP, the
        `record_id` path parameter when the route has one, and the name of
        the RecordStore operation when a storage failure produced the 500.
Not logged: request bodies (titles and descriptions are user content).

Example line:
    PUT /registros/7 500 3.2ms [a1b2c3d4] from 127.0.0.1 record=7 storage_op=update
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from registros.middleware.request_id import request_id_var

logger = logging.getLogger("registros.access")

# Set on request.state by the DatabaseError handler in main.py
STORAGE_OPERATION_ATTR = "storage_operation"


def _status_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status code and duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path

        # Probes hit this every few seconds
        if path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        status = response.status_code

        # The router writes path_params into the shared scope once it matches,
        # so they are only readable after call_next
        record_id = request.scope.get("path_params", {}).get("record_id")
        storage_op = getattr(request.state, STORAGE_OPERATION_ATTR, None)

        message = "%s %s %d %.1fms [%s] from %s"
        args = [request.method, path, status, duration_ms, rid, client_ip]
        if record_id is not None:
            message += " record=%s"
            args.append(record_id)
        if storage_op is not None:
            message += " storage_op=%s"
            args.append(storage_op)

        logger.log(
            _status_level(status),
            message,
            *args,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "record_id": record_id,
                "storage_operation": storage_op,
            },
        )

        return response

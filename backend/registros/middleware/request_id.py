"""
Registros API - Request ID Middleware
======================================

What:  Assigns a correlation ID to each request and returns it in the response.
How:   Reuses a client-sent X-Request-ID header or generates a short UUID,
       stores it in a ContextVar for loggers and exception handlers, and
       echoes it in the X-Request-ID response header.
Who:   Outermost middleware, so the access log and the storage error
       handler in main.py both see the same id.

Accepted client ids:
    Up to 64 printable ASCII characters without spaces. Anything else is
    replaced by a generated id rather than written into the log verbatim.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"

_CLIENT_ID = re.compile(r"[!-~]{1,64}")


def new_request_id() -> str:
    # 8 chars is enough to correlate log lines
    return str(uuid.uuid4())[:8]


def resolve_request_id(header_value: Optional[str]) -> str:
    """The client's id when it is usable, otherwise a fresh one."""
    if header_value and _CLIENT_ID.fullmatch(header_value):
        return header_value
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns a unique ID to each request for tracing.

    Behavior:
        1. Take X-Request-ID from the client if it is a usable token
        2. Otherwise generate a short UUID
        3. Store it in the ContextVar and on request.state
        4. Echo it back in the response header, error responses included
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        # ContextVar for loggers, request.state for route handlers
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response

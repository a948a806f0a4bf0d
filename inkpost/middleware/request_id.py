"""
Inkpost Backend — Request ID Middleware
========================================

What:  Tags each request with a short correlation ID.
How:   Reuses the client's X-Request-ID header when present, otherwise
       generates one; stores it in a ContextVar (read by the exception
       handlers and the access logger) and echoes it in the response.
Who:   Applied to every request via Starlette middleware.
When:  Outermost middleware, so the ID exists before anything logs.

Where the ID shows up:
    - the X-Request-ID response header
    - the `request_id` field of every error body
    - the bracketed field of each access-log line
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local; concurrent requests on one thread each see their own ID.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns a correlation ID to each request.

    Behavior:
        1. Take X-Request-ID from the request if the client sent one
        2. Otherwise generate 8 hex chars from a UUID4
        3. Store it in request_id_var and on request.state
        4. Copy it onto the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

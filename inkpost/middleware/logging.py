"""
Inkpost Backend — Request Logging Middleware
=============================================

What:  One access-log line per request on the "inkpost.access" logger:

    GET /api/posts 200 12.4ms [1f0c2a9b] from 127.0.0.1

Who:   Applied to every request, inside RequestIDMiddleware.
When:  After the response is produced, so status and duration are known.

Level follows the status: 5xx → ERROR, 4xx → WARNING, else INFO.
Health probes are not logged. Bodies and the Authorization header are
never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from inkpost.middleware.request_id import request_id_var

logger = logging.getLogger("inkpost.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, duration and client address."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        # health probes are skipped
        if path.endswith("/health"):
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        # ── Level by status class ─────────────────────────────────────────
        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        # extra= fields reach structured handlers (JSON formatters) untouched
        rid = request_id_var.get("")
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response

"""
Course Catalog Backend — Request Logging Middleware
====================================================

What:  One access log line per HTTP request.
How:   Measures time around the downstream app and logs method, path, query
       string, status and duration at a level chosen by status class.
When:  Runs inside RequestIDMiddleware so the request ID is available.

Log line:
    GET /api/courses?department=CSE 200 12.4ms [1f0c9a2b] from 10.0.0.7

Not logged: request bodies and headers.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from coursecatalog.middleware.request_id import request_id_var

logger = logging.getLogger("coursecatalog.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Levels:
        5xx → ERROR, 4xx → WARNING, everything else → INFO

    /health is skipped; monitors hit it every few seconds.
    """

    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        target = f"{path}?{request.url.query}" if request.url.query else path

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            target,
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

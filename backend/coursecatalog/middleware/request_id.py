"""
Course Catalog Backend — Request ID Middleware
===============================================

What:  Tags each request with a short correlation ID and echoes it back.
Why:   Error bodies and log lines carry the same ID, so a report from the
       catalog frontend can be matched to the server log entry.
How:   Reuses an incoming X-Request-ID or generates one, stores it in a
       ContextVar for loggers and handlers, sets it on the response.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on the same event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns a request ID, preferring one supplied by the client.

    Generated IDs are the first 8 characters of a UUID4; that is plenty for
    correlating log lines within a retention window.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

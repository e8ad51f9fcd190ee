"""
TeenLife Hours Backend — Request ID Middleware
================================================

What:  Tags every request with a short correlation id and echoes it back in
       the X-Request-ID response header.
How:   Uses the client's X-Request-ID when present (the mobile app sends one
       with each call), otherwise generates one. The id is kept in a
       ContextVar so loggers and the error handlers can read it.
When:  Added just inside the rate limiter, outside request logging.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns (or propagates) the X-Request-ID for each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

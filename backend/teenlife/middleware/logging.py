"""
TeenLife Hours Backend — Request Logging Middleware
=====================================================

What:  One access log line per request on the "teenlife.access" logger.
How:   Measures wall time around the handler and picks the level from the
       status code (5xx ERROR, 4xx WARNING, otherwise INFO).

Privacy:
    Logged: method, path, status, duration, client IP, request id.
    Not logged: request bodies (supervisor names and emails), the
    Authorization header, verification codes in full.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from teenlife.middleware.request_id import request_id_var

logger = logging.getLogger("teenlife.access")

_QUIET_PATHS = frozenset({"/health"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration for each request.

    Health probes are skipped; they arrive every few seconds from the load
    balancer and would drown out real traffic.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in _QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method

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

"""
AnyList Gateway - Access Log Middleware
=======================================

What:  Writes one line per request to the `anylist_gateway.access` logger.
How:   Wraps the downstream call in a perf_counter timer; the log level follows
       the response status.
When:  Inside RequestIDMiddleware, so every line carries the request ID.

Example line:
    GET /recipes 200 12.4ms [a1b2c3d4] from 192.168.1.20

Request bodies (item names, recipe text) and credentials are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from anylist_gateway.middleware.request_id import request_id_var

access_logger = logging.getLogger("anylist_gateway.access")

# Supervisors probe these every few seconds
QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        peer = request.client.host if request.client else "unknown"
        access_logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            peer,
        )
        return response

"""
AnyList Gateway - Source IP Filter Middleware
=============================================

What:  Rejects requests whose peer address does not start with the configured
       IP_FILTER prefix (e.g. "192.168.1.").
How:   Plain string prefix match on `request.client.host`; no CIDR parsing.
Who:   Applied to every request via Starlette middleware.
When:  First in the middleware chain, before any client session is opened.

Response on rejection:
    HTTP 403 Forbidden  {"error": "Forbidden"}

Excluded paths:
    /health, /docs, /openapi.json, /redoc

With no prefix configured the middleware lets everything through.
"""

import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from anylist_gateway.exceptions import ForbiddenSourceError

logger = logging.getLogger(__name__)


class IPFilterMiddleware(BaseHTTPMiddleware):
    """Allowlist by address prefix. Behind a proxy this sees the proxy's address."""

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, prefix: Optional[str] = None, **kwargs):
        super().__init__(app, **kwargs)
        self.prefix = prefix or None

    def is_allowed(self, client_ip: str) -> bool:
        return self.prefix is None or client_ip.startswith(self.prefix)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if self.prefix is None or request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = (
            getattr(request.client, "host", "") if request.client else ""
        ) or ""

        if not self.is_allowed(client_ip):
            error = ForbiddenSourceError(client_ip=client_ip)
            logger.warning(
                "Rejected %s %s from %s (filter %s)",
                request.method,
                request.url.path,
                client_ip or "unknown",
                self.prefix,
            )
            return JSONResponse(status_code=error.status_code, content={"error": error.message})

        return await call_next(request)

"""
AnyList Gateway - Health Check Route
====================================

What:  Liveness endpoint for container health checks and add-on supervisors.
How:   Reports configuration state only. It never logs in to the list service,
       so frequent probes cost nothing upstream.

Status levels:
    - healthy:   credentials configured
    - degraded:  credentials missing; every list/recipe call will fail
"""

import logging
import time

from fastapi import APIRouter, Depends

from anylist_gateway import __version__
from anylist_gateway.config import Settings
from anylist_gateway.schemas.common import HealthResponse
from anylist_gateway.session import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    configured = settings.has_credentials and bool(settings.client_factory)
    return HealthResponse(
        status="healthy" if configured else "degraded",
        version=__version__,
        credentials="configured" if settings.has_credentials else "missing",
        default_list=settings.default_list,
        ip_filter=settings.ip_filter,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

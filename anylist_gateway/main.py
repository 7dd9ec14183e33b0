"""
AnyList Gateway - FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) wires middleware, exception handlers and routers and
       stores the settings on `app.state` for the request dependencies.
Who:   uvicorn (`uvicorn anylist_gateway.main:app`) and the CLI in __main__.py.

    ┌─────────────────────────────────────────────────────┐
    │  Middleware:  IP filter → Request ID → Logging      │
    │                                                     │
    │  Routes:      /lists /items /add /remove /update    │
    │               /check /recipes /recipes/{id}         │
    │               /recipe-collections /meal-plan        │
    │               /health                               │
    │                                                     │
    │  Exception handlers:                                │
    │    BadRequest→400  Validation→422  NotFound→404     │
    │    Upstream→429/4xx/500  anything else→500          │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from anylist_gateway import __version__
from anylist_gateway.config import Settings, settings as default_settings
from anylist_gateway.errors import INTERNAL_ERROR_MESSAGE
from anylist_gateway.exceptions import (
    ConfigurationError,
    GatewayError,
    RequestValidationFailed,
    UpstreamError,
)
from anylist_gateway.middleware.ip_filter import IPFilterMiddleware
from anylist_gateway.middleware.logging import RequestLoggingMiddleware
from anylist_gateway.middleware.request_id import RequestIDMiddleware, request_id_var
from anylist_gateway.routes import health, lists, recipes

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] anylist_gateway.access: GET /recipes 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access middleware replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_startup(settings: Settings) -> None:
    """Print the effective configuration, never the password."""
    logger.info("=" * 60)
    logger.info("AnyList Gateway %s starting up...", __version__)
    logger.info("Server port: %d", settings.port)
    if settings.ip_filter:
        logger.info("IP filter: %s", settings.ip_filter)
    if settings.default_list:
        logger.info("Default list: %s", settings.default_list)
    if settings.credentials_file:
        logger.info("Credentials file: %s", settings.credentials_file)

    try:
        settings.validate_required()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")
    logger.info("=" * 60)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    log_startup(settings)

    yield

    logger.info("AnyList Gateway shutting down.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map gateway exceptions to JSON responses.

    Handler hierarchy (most specific wins):
        RequestValidationFailed → 422 {"errors": [...]}
        UpstreamError           → classified status {"error", "retryAfter"?}
        ConfigurationError      → 500 {"error"}
        GatewayError (base)     → exc.status_code {"error"}
        RequestValidationError  → 400 malformed body (FastAPI parsing)
        Exception (fallback)    → 500
    """

    @app.exception_handler(RequestValidationFailed)
    async def handle_validation_failed(request: Request, exc: RequestValidationFailed):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation failed: %s", rid, "; ".join(exc.errors))
        return JSONResponse(status_code=422, content={"errors": exc.errors})

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        content = {"error": exc.message}
        headers = {}
        if exc.retry_after:
            content["retryAfter"] = exc.retry_after
            headers["Retry-After"] = str(exc.retry_after)
        return JSONResponse(status_code=exc.status_code, content=content, headers=headers)

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        rid = request_id_var.get("")
        logger.error("[%s] Configuration error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(GatewayError)
    async def handle_gateway_error(request: Request, exc: GatewayError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_malformed_request(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Malformed request: %s", rid, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Malformed request body"})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to serve with; defaults to the environment-based
                  singleton. The CLI and the tests pass their own instance.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="AnyList Gateway",
        description="REST endpoints for shopping lists, recipes and meal planning.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Added last = runs first: IP filter → Request ID → Logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(IPFilterMiddleware, prefix=settings.ip_filter)

    register_exception_handlers(app)

    app.include_router(lists.router)
    app.include_router(recipes.router)
    app.include_router(health.router)

    return app


app = create_app()

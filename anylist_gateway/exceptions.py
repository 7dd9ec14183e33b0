"""
AnyList Gateway - Exception Hierarchy
=====================================

What:  Application-specific exceptions, one per HTTP outcome the gateway produces.
How:   Each exception carries a client-safe message plus an optional context dict.
       Global handlers registered in main.py turn them into JSON responses.
Who:   Raised by validators, services and middleware; caught by global handlers.

Exception Hierarchy:
    GatewayError (base)
    ├── BadRequestError          → 400 Bad Request       {"error": ...}
    ├── RequestValidationFailed  → 422 Unprocessable     {"errors": [...]}
    ├── NotFoundError            → 404 Not Found         {"error": ...}
    ├── ForbiddenSourceError     → 403 Forbidden         {"error": ...}
    ├── UpstreamError            → classified status     {"error": ..., "retryAfter"?}
    └── ConfigurationError       → startup / CLI failure

Response bodies are flat on purpose: list clients (Home Assistant automations,
shell scripts) read `error` or `errors` directly.
"""

from typing import Any, Dict, List, Optional


class GatewayError(Exception):
    """
    Base exception for all gateway errors.

    Attributes:
        message:  Client-facing description (returned in the response body)
        context:  Extra debug info, logged but never returned
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class BadRequestError(GatewayError):
    """
    A required parameter is missing, empty, or refers to something unusable
    (for example a list name the account does not have).

    HTTP: 400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Bad request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class RequestValidationFailed(GatewayError):
    """
    A well-formed request whose fields have the wrong type, range or format.

    Carries every violation found, not just the first one.

    HTTP: 422 Unprocessable Entity
    """

    status_code = 422

    def __init__(
        self,
        errors: List[str],
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message="Validation failed", context=context)
        self.errors = list(errors)


class NotFoundError(GatewayError):
    """
    The requested recipe or list does not exist on the account.

    HTTP: 404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ForbiddenSourceError(GatewayError):
    """
    The request came from an address outside the configured IP allowlist prefix.

    HTTP: 403 Forbidden
    """

    status_code = 403

    def __init__(self, client_ip: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["client_ip"] = client_ip
        super().__init__(message="Forbidden", context=ctx)
        self.client_ip = client_ip


class UpstreamError(GatewayError):
    """
    The external list client failed; status already classified.

    Built by `errors.classify_upstream_error`, never raised directly by the
    client library.

    HTTP: 429 (rate limited), the forwarded 4xx, or 500
    """

    def __init__(
        self,
        status_code: int = 500,
        message: str = "Internal server error",
        retry_after: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if retry_after:
            ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
        self.retry_after = retry_after


class ConfigurationError(GatewayError):
    """
    Settings are incomplete or the client factory cannot be loaded.

    Raised at startup and by the per-request client dependency.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "The gateway is not configured",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

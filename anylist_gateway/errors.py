"""
AnyList Gateway - Upstream Error Classifier
===========================================

What:  Turns a failure raised by the external list client into an UpstreamError
       with the HTTP status the gateway should answer with.
How:   A fixed lookup, checked in order:

           rate limited (status 429 or a rate-limit phrase)  → 429 + Retry-After
           inbound 4xx status                                → same status, message
           anything else                                     → 500

Who:   Called by the service layer (`services.client_base.upstream_call`) and by
       the per-request client dependency around login.

The client library is opaque: its errors may carry the HTTP status as
`status`, `status_code`, or on an attached httpx-style `response`.
"""

import logging
from typing import Optional

from anylist_gateway.exceptions import GatewayError, UpstreamError

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
RATE_LIMIT_RETRY_AFTER = 60
INTERNAL_ERROR_MESSAGE = "Internal server error"

RATE_LIMIT_KEYWORDS = (
    "rate limit",
    "too many requests",
    "throttle",
    "throttled",
    "quota exceeded",
    "request limit",
)


def extract_status(exc: BaseException) -> Optional[int]:
    """Best-effort HTTP status of an upstream error, or None."""
    for attr in ("status", "status_code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def error_message(exc: BaseException) -> str:
    return str(getattr(exc, "message", None) or exc) or type(exc).__name__


def is_rate_limit_error(exc: BaseException) -> bool:
    """True for an explicit 429 or a message mentioning rate limiting."""
    if extract_status(exc) == 429:
        return True
    message = error_message(exc).lower()
    return any(keyword in message for keyword in RATE_LIMIT_KEYWORDS)


def classify_upstream_error(exc: BaseException) -> GatewayError:
    """
    Map an external-client failure to the error the gateway responds with.

    Gateway errors raised inside a client call (NotFoundError, ...) pass
    through untouched.
    """
    if isinstance(exc, GatewayError):
        return exc

    status = extract_status(exc)
    context = {"original_error": type(exc).__name__}

    if is_rate_limit_error(exc):
        return UpstreamError(
            status_code=429,
            message=RATE_LIMIT_MESSAGE,
            retry_after=RATE_LIMIT_RETRY_AFTER,
            context=context,
        )

    if status is not None and 400 <= status < 500:
        return UpstreamError(status_code=status, message=error_message(exc), context=context)

    return UpstreamError(status_code=500, message=INTERNAL_ERROR_MESSAGE, context=context)

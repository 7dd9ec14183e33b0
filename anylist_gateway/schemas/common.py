"""
AnyList Gateway - Shared Response Schemas
=========================================

What:  Error bodies (used in OpenAPI `responses=`) and the health payload.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Body of every 400/403/404/429/500 response.

    Example:
        {"error": "Recipe ID is required"}
        {"error": "Rate limit exceeded. Please try again later.", "retryAfter": 60}
    """

    error: str = Field(description="Human-readable error description")
    retryAfter: Optional[int] = Field(
        default=None, description="Seconds to wait before retrying (429 only)"
    )


class ValidationErrorResponse(BaseModel):
    """
    Body of a 422 response: one message per violation.

    Example:
        {"errors": ["Rating must be an integer between 1 and 5",
                    "Cook time must be a non-negative integer"]}
    """

    errors: List[str]


class HealthResponse(BaseModel):
    status: str = Field(description="healthy, or degraded when credentials are missing")
    version: str
    credentials: str = Field(description="configured or missing")
    default_list: Optional[str] = None
    ip_filter: Optional[str] = None
    uptime_seconds: float

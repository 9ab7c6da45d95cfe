"""
Tech News Backend — Shared Response Schemas
============================================

What:  Error, health and mutation-result models shared by every router.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MutationResponse(BaseModel):
    """
    What:  Result of an update or delete.
    Who:   Returned by PUT and DELETE endpoints.

    `affected_rows` is always >= 1 in a 200 response; zero matches become a
    404 instead.
    """
    affected_rows: int = Field(description="Number of rows changed")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description for display to users
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "not_found",
            "message": "No user found with this id",
            "request_id": "1f0c9a2b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer health checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

"""
Course Catalog Backend — Shared Response Schemas
=================================================

What:  Error and health response models shared by every route.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code ("bad_request", "not_found", "server_error")
        message: Human-readable description for display to users
        details: Optional extra context (e.g. which parameter was missing)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "bad_request",
            "message": "Course number is required",
            "details": {"field": "course_number"},
            "request_id": "1f0c9a2b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for monitoring and load balancer health checks.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

"""
Course Catalog Backend — Custom Exception Hierarchy
====================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and middleware; caught by global handlers.

Exception Hierarchy:
    CourseCatalogError (base)
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found (empty result, not a failure)
    ├── DatabaseError            → 500 Internal Server Error
    ├── SerializationError       → 500 Internal Server Error (logged separately)
    └── RateLimitExceededError   → 429 Too Many Requests
"""

from typing import Any, Dict, Optional


class CourseCatalogError(Exception):
    """
    Base exception for all course catalog application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned for 5xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CourseCatalogError):
    """
    Raised when client input is missing or malformed.

    When:    A required parameter (e.g. the course number) is absent or empty.
    HTTP:    400 Bad Request

    Schema-level problems (wrong JSON types) are rejected by Pydantic first
    and surface as FastAPI's 422; this class covers rules checked by services.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(CourseCatalogError):
    """
    Raised when a lookup matched no rows.

    HTTP:    404 Not Found

    SQLAlchemy returns an empty list for a query with no matches. Services
    convert that into NotFoundError where an empty result should be reported
    to the client as "nothing here" rather than as a failure.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(CourseCatalogError):
    """
    Raised when a database query fails unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is generic. Driver details (SQL text,
    constraint names) go to the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class SerializationError(CourseCatalogError):
    """
    Raised when a fetched row cannot be converted into its response shape.

    When:    A syllabus row identifier is NULL or not an integer, so it cannot
             be rendered as the decimal string clients expect, or a course
             row fails CourseResponse validation (e.g. a NULL title).
    HTTP:    500 Internal Server Error

    Kept apart from DatabaseError so the handler can log it under its own
    message. Clients see the same 500 status either way.
    """

    def __init__(
        self,
        message: str = "Failed to process data for response.",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class RateLimitExceededError(CourseCatalogError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after

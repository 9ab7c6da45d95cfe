"""
Tech News Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the different failure kinds.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) map them to
       HTTP status codes and a structured JSON body.
Who:   Raised by services, models and dependencies; caught by global handlers.

Exception Hierarchy:
    TechNewsError (base)
    ├── ValidationError      → 400 Bad Request (bad email, short password, duplicates)
    ├── AuthenticationError  → 400 Bad Request (unknown email, wrong password)
    ├── UnauthorizedError    → 401 Unauthorized (login required)
    ├── NotFoundError        → 404 Not Found
    └── DatabaseError        → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class TechNewsError(Exception):
    """
    Base exception for all Tech News application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only returned where the
                  handler chooses to)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TechNewsError):
    """
    Raised when input violates a model constraint.

    When:    Malformed email, password shorter than 4 characters, duplicate
             email, a second vote by the same user on the same post.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Password must be at least 4 characters long",
            "details": {"field": "password"}
        }
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


class AuthenticationError(TechNewsError):
    """
    Raised when login credentials do not check out.

    HTTP:    400 Bad Request

    Only two fixed messages are ever used: one for an unknown email and one
    for a wrong password.
    """

    def __init__(
        self,
        message: str = "Invalid credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthorizedError(TechNewsError):
    """Raised when an anonymous session calls a login-required route (401)."""

    def __init__(
        self,
        message: str = "You must be logged in to do that",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TechNewsError):
    """
    Raised when a requested row does not exist.

    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; services convert that None into
    this exception. A missing row is a normal outcome for the caller, so the
    handler logs nothing above INFO.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(
            message=message or f"No {resource} found with this id",
            context=ctx,
        )


class DatabaseError(TechNewsError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Driver errors,
    SQL text and constraint names are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

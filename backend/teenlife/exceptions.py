"""
TeenLife Hours Backend — Custom Exception Hierarchy
=====================================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by services, the auth dependency and middleware.

Exception Hierarchy:
    TeenLifeError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized
    ├── ForbiddenError           → 403 Forbidden (not the owner)
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests

Notification failures have no exception type here: the emitter swallows and
logs them, so they never reach a handler.
"""

from typing import Any, Dict, Optional


class TeenLifeError(Exception):
    """
    Base exception for all application errors.

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


class ValidationError(TeenLifeError):
    """
    Raised when client input fails a business rule.

    When:    hours <= 0, blank organization/description, missing date,
             blank verification code.
    HTTP:    400 Bad Request

    Schema-level problems (wrong JSON types) are still reported by FastAPI
    as 422; this class covers rules Pydantic does not express.

    Example response:
        {
            "success": false,
            "error": "validation_error",
            "message": "hours must be greater than 0",
            "details": {"field": "hours"}
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


class AuthenticationError(TeenLifeError):
    """
    Raised when the bearer token is missing, malformed, expired or forged.

    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(TeenLifeError):
    """
    Raised when an authenticated caller touches a record they do not own.

    When:    GET/PUT/DELETE /api/volunteer/{id} for another user's entry.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "You do not have access to this entry",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TeenLifeError):
    """
    Raised when a requested resource does not exist.

    When:    Unknown hour entry id, unknown verification code, or a
             notification that does not exist for the caller.
    HTTP:    404 Not Found
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


class DatabaseError(TeenLifeError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, verification code collisions that
             outlast the retry budget, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the context
    (constraint names, original exception type) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(TeenLifeError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests, with a Retry-After header.
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

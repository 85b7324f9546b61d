"""
TaskTrack Backend - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for each error class the API reports.
How:   Each exception carries a client-safe message and an optional context
       dict. Global handlers (registered in main.py) map them to status codes
       and a uniform JSON body.
Who:   Raised by services and the persistence gateway.

Exception Hierarchy:
    TaskTrackError (base)
    ├── ValidationError       → 400 Bad Request
    ├── ConflictError         → 400 Bad Request (duplicate email)
    ├── AuthenticationError   → 401 Unauthorized
    ├── NotFoundError         → 404 Not Found
    └── DatabaseError         → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class TaskTrackError(Exception):
    """
    Base exception for all TaskTrack application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TaskTrackError):
    """
    Raised when client input fails validation.

    The message names the offending field so the client can fix the request.
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


class ConflictError(TaskTrackError):
    """Raised when a unique value (the account email) is already taken."""

    def __init__(
        self,
        message: str = "Email already registered",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthenticationError(TaskTrackError):
    """
    Raised on any failed login.

    Unknown email and wrong password both raise this with the same message,
    so the response never tells a caller which accounts exist. Which factor
    failed goes into `context` for the server log only.
    """

    def __init__(
        self,
        message: str = "Invalid credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TaskTrackError):
    """
    Raised when a referenced user or task does not exist.

    The gateway returns None for missing rows; services convert that into
    this exception before any dependent operation runs.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(TaskTrackError):
    """
    Raised when a store operation fails unexpectedly.

    The client always receives a generic message. The original exception
    type and the operation name travel in `context` and are logged.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

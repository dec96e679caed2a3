"""
CodigoHub Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions, one per error kind.
Why:   Services classify failures by raising these; global handlers in
       main.py map each class to a status code and a uniform JSON body.
How:   Each exception carries a human-readable message, a taxonomy `code`
       and an optional context dict.
Who:   Raised by services and the security dependency; caught by handlers.

Exception Hierarchy:
    CodigoHubError (base)
    ├── ValidationError       → 400  VALIDATION
    ├── AuthenticationError   → 401  AUTHENTICATION
    ├── ForbiddenError        → 403  FORBIDDEN
    ├── NotFoundError         → 404  NOT_FOUND
    ├── DuplicateError        → 409  DUPLICATE
    ├── DeleteError           → 500  DELETE_ERROR
    └── DatabaseError         → 500  STORAGE

Anything that is not a CodigoHubError is unclassified and ends up in the
catch-all 500 handler.
"""

from typing import Any, Dict, Optional


class CodigoHubError(Exception):
    """
    Base exception for all CodigoHub application errors.

    Attributes:
        message:      Error description returned as the raw `error` string
        code:         Taxonomy tag (NOT_FOUND, FORBIDDEN, ...)
        status_code:  HTTP status used by the global handler
        context:      Additional debug info (logged, returned as `details`)
    """

    code: str = "ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CodigoHubError):
    """
    Raised when input is missing or malformed.

    When:  Required field empty, enum value outside its allowed set.
    HTTP:  400 Bad Request
    """

    code = "VALIDATION"
    status_code = 400

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


class AuthenticationError(CodigoHubError):
    """
    Raised when no valid identity can be resolved.

    When:  Missing/expired/invalid bearer token, wrong login credentials.
    HTTP:  401 Unauthorized
    """

    code = "AUTHENTICATION"
    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(CodigoHubError):
    """
    Raised when the authenticated actor lacks rights on an existing resource.

    HTTP:  403 Forbidden
    Note:  Always raised after the existence check; NotFoundError wins.
    """

    code = "FORBIDDEN"
    status_code = 403

    def __init__(
        self,
        message: str = "Forbidden",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(CodigoHubError):
    """
    Raised when a requested resource does not exist.

    HTTP:  404 Not Found

    SQLAlchemy returns None for missing records; services convert that None
    into this exception so routes never have to check.
    """

    code = "NOT_FOUND"
    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id is not None:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class DuplicateError(CodigoHubError):
    """
    Raised when an association or unique value already exists.

    When:  Snippet already in a collection (Collections manager), email
           already registered, user already subscribed to a category.
    HTTP:  409 Conflict
    """

    code = "DUPLICATE"
    status_code = 409

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DeleteError(CodigoHubError):
    """
    Raised when a delete statement reports zero affected rows after the
    existence check succeeded.

    HTTP:  500 Internal Server Error
    """

    code = "DELETE_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str = "The resource could not be deleted",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(CodigoHubError):
    """
    Raised when database operations fail unexpectedly.

    What:    A query, insert, or update failed at the driver level.
    HTTP:    500 Internal Server Error

    Security Note:
        The response message is always generic. The original exception type
        is kept in `context` and logged server-side only.
    """

    code = "STORAGE"
    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

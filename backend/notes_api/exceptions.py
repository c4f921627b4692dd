"""
Notes API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the notes API and the mailer.
Why:   Each failure class maps to exactly one HTTP status code, so the
       route handlers never build error responses by hand.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) catch these
       and return structured JSON error responses.
Who:   Raised by the validator, services and the mailer; caught by handlers.

Exception Hierarchy:
    NotesAPIError (base)
    ├── ValidationError     → 400 Bad Request (client can fix the input)
    ├── NotFoundError       → 404 Not Found
    ├── PersistenceError    → 500 Internal Server Error (store failed)
    └── EmailError          → mailer failures (CLI exit code 1)
"""

from typing import Any, Dict, List, Optional


class NotesAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the
                  handler explicitly allows it)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesAPIError):
    """
    Raised when a submitted payload fails validation.

    HTTP: 400 Bad Request

    The `errors` list enumerates every offending field so the client can fix
    them all in one round trip:

        {
            "error": "validation_error",
            "message": "Note payload is invalid",
            "details": {"errors": [{"field": "title", "message": "title must not be empty"}]}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        self.errors = errors or []
        ctx["errors"] = self.errors
        super().__init__(message=message, context=ctx)

    @property
    def fields(self) -> List[str]:
        """Names of the fields that failed, in report order."""
        return [e["field"] for e in self.errors]


class NotFoundError(NotesAPIError):
    """
    Raised when a requested resource does not exist.

    HTTP: 404 Not Found

    The repository returns None (or False on delete) for a missing row; the
    service layer converts that into this exception so HTTP concerns stay
    out of the persistence code.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class PersistenceError(NotesAPIError):
    """
    Raised when the underlying store is unreachable or a query fails.

    HTTP: 500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The driver
        error (SQL text, constraint names, host names) goes to the server
        log through `context` and is never part of the response body.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class EmailError(NotesAPIError):
    """Raised when an email cannot be rendered or handed to the SMTP relay."""

    def __init__(
        self,
        message: str = "Email could not be sent",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

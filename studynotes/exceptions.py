"""
StudyNotes — Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for the backend and the editor client.
How:   Each exception carries a user-safe message and an optional context dict.
       Global exception handlers (registered in main.py) translate backend
       exceptions into structured JSON error responses; the API client
       (editor/client.py) translates error responses back into the same types.

Exception Hierarchy:
    StudyNotesError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    ├── NotFoundError     → 404 Not Found
    ├── DatabaseError     → 500 Internal Server Error
    └── ApiError          → client side: unexpected status or transport failure
"""

from typing import Any, Dict, Optional


class StudyNotesError(Exception):
    """
    Base exception for all StudyNotes application errors.

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


class ValidationError(StudyNotesError):
    """
    Raised when input fails validation.

    When:    Malformed request body or id, missing search query, duplicate
             block ids, a media file of the wrong type or size.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Search query is required",
            "details": {"field": "q"}
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


class NotFoundError(StudyNotesError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PATCH/DELETE /api/notes/{id} with an id that is not stored.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(StudyNotesError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the SQL error is
    logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ApiError(StudyNotesError):
    """
    Raised by the editor's API client for failures that are not a
    validation or not-found response: 5xx, 429, unreachable server, timeouts.

    Attributes:
        status_code: HTTP status of the response, None for transport failures
    """

    def __init__(
        self,
        message: str = "The notes service is unavailable",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code

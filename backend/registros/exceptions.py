"""
Registros API - Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the three failure classes the API knows.
How:   Each exception carries a client-facing message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and return
       `{"error": <message>}` bodies with the matching HTTP status code.
Who:   Raised by route handlers and the storage adapter.

Exception Hierarchy:
    RegistrosError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    ├── NotFoundError     → 404 Not Found
    └── DatabaseError     → 500 Internal Server Error
"""

from typing import Any, Dict, Optional, Union


class RegistrosError(Exception):
    """
    Base exception for all application errors.

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


class ValidationError(RegistrosError):
    """
    Raised when the request body fails a presence check.

    HTTP:    400 Bad Request
    Example: POST /registros with no title → {"error": "Title is required"}
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


class NotFoundError(RegistrosError):
    """
    Raised when no row matches the requested id.

    HTTP:    404 Not Found
    When:    get_by_id returned None, update/delete affected zero rows, or
             the path id could not be an integer id at all.
    """

    def __init__(
        self,
        message: str = "Record not found",
        resource_id: Optional[Union[int, str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class DatabaseError(RegistrosError):
    """
    Raised when a storage operation fails.

    HTTP:    500 Internal Server Error
    When:    Connection failure, constraint violation, disk error, locked file.

    The driver message is kept in `context["driver_message"]` and logged
    server-side. Clients get a generic message unless the
    EXPOSE_STORAGE_ERRORS setting is enabled.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        operation: Optional[str] = None,
        driver_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        if driver_message:
            ctx["driver_message"] = driver_message
        super().__init__(message=message, context=ctx)
        self.operation = operation
        self.driver_message = driver_message

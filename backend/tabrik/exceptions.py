"""
Tabrik Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": ...}` JSON responses with the matching status code.
Who:   Raised by the connector, services and routes; caught by global handlers.

Exception Hierarchy:
    TabrikError (base)
    ├── NotFoundError     → 404 Not Found (missing frontend entry document)
    └── DatabaseError     → 500 Internal Server Error (store unreachable or failed)
"""

from typing import Any, Dict, Optional


class TabrikError(Exception):
    """
    Base exception for all Tabrik application errors.

    Attributes:
        message:  Error description returned to the client as `error`
        context:  Additional debug info (logged, not returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(TabrikError):
    """
    Raised when a requested resource does not exist.

    Deleting or updating a missing document is NOT an error; this is only
    used for files the server is expected to serve.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(TabrikError):
    """
    Raised when a MongoDB operation fails or no connection exists.

    What:    Insert, update or delete failed, the connector is in degraded
             mode and the operation has no fallback (update/delete), or a
             document id could not be cast to an ObjectId.
    HTTP:    500 Internal Server Error

    The message carries the underlying driver error text; the frontend shows
    it as-is.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

"""
HTMX Todos: Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for the error scenarios of the todo routes.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers registered in main.py turn them into JSON error
       responses with the matching status code; context is logged only.
Who:   Raised by services; caught by the handlers in main.py.

Exception Hierarchy:
    TodoAppError (base)          → 500 Internal Server Error
    ├── ValidationError          → 400 Bad Request (empty content)
    ├── NotFoundError            → 404 Not Found (toggle on a missing id)
    └── DatabaseError            → 500 Internal Server Error (storage failure)

Schema-level problems (missing form field, non-numeric path id) never get
here: FastAPI rejects them with 422 before the handler runs.
"""

from typing import Any, Dict, Optional


class TodoAppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in a response)
        context:  Additional debug info (logged, NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TodoAppError):
    """
    Raised when input passes the request schema but breaks a business rule.

    HTTP: 400 Bad Request
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


class NotFoundError(TodoAppError):
    """
    Raised when a requested todo does not exist.

    SQLAlchemy reports a missing row as an empty result, not an exception;
    the service converts that into this error.

    HTTP: 404 Not Found
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


class DatabaseError(TodoAppError):
    """
    Raised when a storage operation fails (connection lost, constraint violation).

    The client always gets a generic message; the original exception type
    travels in `context` for the server log.

    HTTP: 500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

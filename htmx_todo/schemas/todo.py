"""
HTMX Todos: Pydantic Request/Response Schemas
===============================================

What:  The typed contract at the HTTP boundary.
How:   FastAPI validates the form body against `TodoCreate` and rejects it
       with 422 before the handler runs. Rows leave the service as frozen
       `TodoView` snapshots, the only thing render functions ever see.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class TodoCreate(BaseModel):
    """
    Form body of POST /todos.

    Only emptiness is checked: no trimming, no maximum length.
    """
    content: str = Field(min_length=1, description="Text of the new todo")


# ══════════════════════════════════════════════════════════════════════════
# Snapshot passed to the renderer
# ══════════════════════════════════════════════════════════════════════════


class TodoView(BaseModel):
    """
    Immutable snapshot of one `todos` row.

    Built with `TodoView.model_validate(row)` from either an ORM `Todo`
    instance or a RETURNING row; both expose the columns as attributes.
    """
    id: int
    content: str
    completed: bool

    model_config = ConfigDict(from_attributes=True, frozen=True)


# ══════════════════════════════════════════════════════════════════════════
# JSON responses (errors and health only; todo endpoints return HTML)
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body shared by all exception handlers.

    Example:
        {
            "error": "not_found",
            "message": "todo with ID '42' was not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

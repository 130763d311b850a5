"""
HTMX Todos: Request ID Middleware
===================================

What:  Assigns a short correlation id to each request and echoes it back.
How:   Takes a well-formed client-sent X-Request-ID or generates one, stores
       it in a ContextVar (read by the access logger and exception handlers)
       and on request.state, and sets it on the response.

Responses produced by the catch-all exception handler never pass back
through this middleware; that handler sets the header itself.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# The id is written into every access log line
_CLIENT_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def client_request_id(request: Request) -> Optional[str]:
    """The caller's X-Request-ID, or None when absent or malformed."""
    value = request.headers.get(REQUEST_ID_HEADER)
    if value and _CLIENT_ID_PATTERN.fullmatch(value):
        return value
    return None


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Adds X-Request-ID to every response that comes back through it."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = client_request_id(request) or new_request_id()
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response

"""
HTMX Todos: Request Logging Middleware
========================================

What:  One access log line per request on the `htmx_todo.access` logger.
How:   Times call_next and logs method, path, status, duration, whether the
       request came from htmx (HX-Request header), request id and client.
       A request whose handler raised is logged as 500 before the
       exception continues to the catch-all handler.

Line format:
    POST /todos 200 2.4ms htmx [a1b2c3d4] from 127.0.0.1

Request bodies (todo content) are never logged. /health is not logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from htmx_todo.middleware.request_id import request_id_var

logger = logging.getLogger("htmx_todo.access")

UNLOGGED_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes the access log; runs inside RequestIDMiddleware."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in UNLOGGED_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            self._log(request, status, (time.perf_counter() - start) * 1000)

    @staticmethod
    def _log(request: Request, status: int, duration_ms: float) -> None:
        source = "htmx" if request.headers.get("HX-Request") == "true" else "direct"
        # request.client is None under some test transports
        client = request.client.host if request.client else "unknown"
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms %s [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            source,
            request_id_var.get(""),
            client,
        )

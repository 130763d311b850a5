# Middleware package init
"""
HTMX Todos: Middleware Package
================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → Route Handler

    Response headers gain X-Request-ID on the way back out; the logging
    middleware measures duration around everything inside it.
"""

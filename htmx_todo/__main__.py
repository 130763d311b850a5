"""Run the server: `python -m htmx_todo` (host/port from BACKEND_HOST / BACKEND_PORT)."""

import uvicorn

from htmx_todo.config import settings


def main() -> None:
    uvicorn.run(
        "htmx_todo.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

"""
HTMX Todos: Page Route
========================

What:  GET /, the only full HTML document. Its body pulls in the list
       fragment from GET /todos on load.
"""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from htmx_todo.config import Settings
from htmx_todo.render import index_page

router = APIRouter(tags=["Pages"])


@router.get("/", response_class=HTMLResponse, summary="Page shell")
async def index(request: Request) -> HTMLResponse:
    settings: Settings = request.app.state.settings
    return HTMLResponse(
        content=index_page(title=settings.app_title, script_urls=settings.script_urls)
    )

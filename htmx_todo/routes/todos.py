"""
HTMX Todos: Todo Route Handlers
=================================

What:  The four todo endpoints. Each one validates its input, calls exactly
       one TodoService operation and exactly one render function.
Who:   Called by htmx from the page served at GET /.

Route Inventory:
    GET    /todos               list fragment + creation form
    POST   /todos               single new item fragment
    POST   /todos/toggle/{id}   single updated item fragment
    DELETE /todos/{id}          empty body (htmx removes the item)

Malformed input (missing/empty `content`, non-numeric id) is rejected by
FastAPI with 422 before any handler body runs.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from htmx_todo.database import get_db_session
from htmx_todo.render import todo_item, todo_list
from htmx_todo.schemas.todo import ErrorResponse, TodoCreate
from htmx_todo.services.todo_service import todo_service

router = APIRouter(prefix="/todos", tags=["Todos"])


@router.get(
    "",
    response_class=HTMLResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Render all todos",
)
async def list_todos(db: AsyncSession = Depends(get_db_session)) -> HTMLResponse:
    """Every todo in insertion order, followed by the creation form."""
    todos = await todo_service.list_todos(db=db)
    return HTMLResponse(content=todo_list(todos))


@router.post(
    "",
    response_class=HTMLResponse,
    responses={
        400: {"description": "Empty content", "model": ErrorResponse},
        422: {"description": "Malformed form body"},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a todo",
)
async def create_todo(
    payload: Annotated[TodoCreate, Form()],
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    """
    Create a todo from the form field `content`.

    Returns the new item only; the form's hx-swap="beforebegin" places it
    above the form.
    """
    todo = await todo_service.create_todo(db=db, content=payload.content)
    return HTMLResponse(content=todo_item(todo))


@router.post(
    "/toggle/{todo_id}",
    response_class=HTMLResponse,
    responses={
        404: {"description": "Todo not found", "model": ErrorResponse},
        422: {"description": "Non-numeric id"},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Toggle a todo's completed flag",
)
async def toggle_todo(
    todo_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    todo = await todo_service.toggle_todo(db=db, todo_id=todo_id)
    return HTMLResponse(content=todo_item(todo))


@router.delete(
    "/{todo_id}",
    response_class=HTMLResponse,
    responses={
        422: {"description": "Non-numeric id"},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a todo",
)
async def delete_todo(
    todo_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    """
    Delete a todo; deleting a missing id succeeds too.

    Responds 200 with an empty body (htmx skips the swap on 204), so the
    item's outerHTML is replaced with nothing.
    """
    await todo_service.delete_todo(db=db, todo_id=todo_id)
    return HTMLResponse(content="", status_code=200)

"""
HTMX Todos: Application Package Initializer
=============================================

What: Server-rendered to-do list. Every endpoint returns an HTML fragment
      that htmx swaps into the already-loaded page.
Who:  Imported by uvicorn (`htmx_todo.main:app`), Alembic and pytest.

Architecture Note:

    ┌─────────────────────────────────────┐
    │     Routes (HTTP → HTML fragments)  │  ← validate input, pick renderer
    ├─────────────────────────────────────┤
    │   Services (one statement per op)   │  ← list / create / toggle / delete
    ├─────────────────────────────────────┤
    │  Render (TodoView → Markup), Schemas│  ← pure functions, frozen snapshots
    ├─────────────────────────────────────┤
    │   Database (async SQLAlchemy)       │  ← one handle per process
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

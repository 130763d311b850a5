# Routes package init
"""
HTMX Todos: Routes Package
============================

Route Inventory:
    - pages.py:   GET    /                   (page shell)
    - todos.py:   GET    /todos              (list fragment)
                  POST   /todos              (create)
                  POST   /todos/toggle/{id}  (toggle)
                  DELETE /todos/{id}         (delete)
    - health.py:  GET    /health             (service health check)

Handlers stay thin: parse the request, call one service method, call one
render function, wrap the result in an HTMLResponse.
"""

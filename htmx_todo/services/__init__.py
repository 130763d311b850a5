# Services package init
"""
HTMX Todos: Services Layer
============================

Service Inventory:
    - TodoService: list / create / toggle / delete against the `todos` table
"""

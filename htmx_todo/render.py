"""
HTMX Todos: HTML Fragment Rendering
=====================================

What:  Pure functions turning `TodoView` snapshots into HTML.
How:   Each function builds its markup from its arguments only (no settings,
       no request, no database) and returns a `markupsafe.Markup`, so
       fragments nest without double escaping while user text is escaped.
Who:   Route handlers in routes/pages.py and routes/todos.py.

htmx wiring:
    checkbox  hx-post   /todos/toggle/{id}  → replaces its item <div>
    X button  hx-delete /todos/{id}         → replaces its item <div> with nothing
    form      hx-post   /todos              → new item inserted before the form
"""

from typing import Iterable, Sequence

from markupsafe import Markup, escape

from htmx_todo.schemas.todo import TodoView


def base_html(body: Markup, title: str, script_urls: Sequence[str]) -> Markup:
    """Wrap `body` in a complete HTML document."""
    scripts = Markup("\n    ").join(
        Markup('<script src="{}"></script>').format(url) for url in script_urls
    )
    return Markup(
        "<!DOCTYPE html>\n"
        "<html>\n"
        "  <head>\n"
        '    <meta charset="utf-8" />\n'
        '    <meta name="viewport" content="width=device-width, initial-scale=1, shrink-to-fit=no" />\n'
        f"    <title>{escape(title)}</title>\n"
        f"    {scripts}\n"
        "  </head>\n"
        f"  {body}\n"
        "</html>\n"
    )


def index_page(title: str, script_urls: Sequence[str]) -> Markup:
    """
    Page shell served at GET /.

    The body is empty on arrival and loads the list fragment into itself as
    soon as htmx fires the `load` trigger.
    """
    body = Markup(
        '<body class="flex w-full h-screen justify-center items-center" '
        'hx-get="/todos" hx-trigger="load" hx-swap="innerHTML"></body>'
    )
    return base_html(body, title=title, script_urls=script_urls)


def todo_item(todo: TodoView) -> Markup:
    """
    Render a single todo: its text, a completion checkbox and a delete button.

    Both controls target the enclosing <div> and swap its outerHTML, so the
    toggle response replaces the item and the empty delete response removes it.
    """
    checked = " checked" if todo.completed else ""
    return Markup(
        '<div class="flex flex-row space-x-3">'
        f"<p>{escape(todo.content)}</p>"
        f'<input type="checkbox"{checked} hx-post="/todos/toggle/{todo.id}" '
        'hx-target="closest div" hx-swap="outerHTML" />'
        f'<button class="text-red-600" hx-delete="/todos/{todo.id}" '
        'hx-target="closest div" hx-swap="outerHTML">X</button>'
        "</div>"
    )


def todo_form() -> Markup:
    """Creation form; htmx inserts the returned item just before it."""
    return Markup(
        '<form class="flex flex-row space-x-3" hx-post="/todos" hx-swap="beforebegin">'
        '<input type="text" name="content" class="border border-black" />'
        '<button type="submit">Submit</button>'
        "</form>"
    )


def todo_list(todos: Iterable[TodoView]) -> Markup:
    """All items followed by the creation form, in one <div>."""
    items = Markup("").join(todo_item(todo) for todo in todos)
    return Markup(f"<div>{items}{todo_form()}</div>")

"""
HTMX Todos: Todo SQLAlchemy Model
===================================

What:  ORM model for the `todos` table.
Who:   TodoService (queries), Database.create_all() and Alembic (schema).

Table Design:
    - id: integer primary key assigned by the database on insert.
      `sqlite_autoincrement` makes SQLite emit AUTOINCREMENT so an id is
      never handed out twice, even after the highest row is deleted.
      PostgreSQL sequences behave this way already.
    - content: text supplied at creation, never updated afterwards.
    - completed: flipped only by the toggle operation.
"""

from sqlalchemy import Boolean, Integer, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from htmx_todo.database import Base


class Todo(Base):
    """
    One task in the list.

    Lifecycle:
        nonexistent → completed=False   (create)
        completed=False ⇄ completed=True (toggle)
        any → nonexistent               (delete, hard delete only)
    """

    __tablename__ = "todos"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    def __repr__(self) -> str:
        return f"<Todo(id={self.id}, completed={self.completed})>"

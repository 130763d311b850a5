"""
HTMX Todos: Todo Service (Business Logic)
===========================================

What:  The four todo operations, each issuing exactly one SQL statement.
How:   Receives the request's AsyncSession, runs its statement, commits
       writes before returning, and converts the resulting row(s) into
       frozen `TodoView` snapshots. The session dependency only rolls back
       and closes.
Who:   Called by the handlers in routes/todos.py.

Statements:
    list_todos   SELECT * FROM todos ORDER BY id
    create_todo  INSERT INTO todos (content, completed) VALUES (:content, false)
    toggle_todo  UPDATE todos SET completed = NOT completed WHERE id = :id RETURNING *
    delete_todo  DELETE FROM todos WHERE id = :id

Toggle negates inside the UPDATE itself, so two concurrent toggles of the
same row serialize in the database and flip the flag twice.
"""

import logging
from typing import List

from sqlalchemy import delete, not_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from htmx_todo.exceptions import DatabaseError, NotFoundError, ValidationError
from htmx_todo.models.todo import Todo
from htmx_todo.schemas.todo import TodoView

logger = logging.getLogger(__name__)


class TodoService:
    """
    Stateless todo operations.

    Error Handling Strategy:
        SQLAlchemy errors are wrapped in DatabaseError (generic message,
        original type kept in context). NotFoundError and ValidationError
        propagate unchanged.
    """

    async def list_todos(self, db: AsyncSession) -> List[TodoView]:
        """
        Return every todo in insertion order.

        Raises:
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            result = await db.execute(select(Todo).order_by(Todo.id))
            todos = [TodoView.model_validate(todo) for todo in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing todos: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve todos. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.debug("Listed %d todos", len(todos))
        return todos

    async def create_todo(self, db: AsyncSession, content: str) -> TodoView:
        """
        Insert a new, not yet completed todo.

        Args:
            db: Async database session
            content: Text of the todo; stored exactly as given

        Returns:
            Snapshot of the new row, including the id assigned by the database

        Raises:
            ValidationError: content is empty (→ 400); nothing is written
            DatabaseError: Insert failed (→ 500)
        """
        if len(content) == 0:
            raise ValidationError(message="Content cannot be empty.", field="content")

        todo = Todo(content=content, completed=False)
        try:
            db.add(todo)
            # Flush sends the INSERT and populates todo.id
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error creating todo: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the todo. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Todo %s created", todo.id)
        return TodoView.model_validate(todo)

    async def toggle_todo(self, db: AsyncSession, todo_id: int) -> TodoView:
        """
        Flip `completed` on one todo and return the updated row.

        Raises:
            NotFoundError: No todo has this id (→ 404)
            DatabaseError: Update failed (→ 500)
        """
        stmt = (
            update(Todo)
            .where(Todo.id == todo_id)
            .values(completed=not_(Todo.completed))
            .returning(Todo)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(stmt)
            todo = result.scalar_one_or_none()
            if todo is not None:
                await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error toggling todo %s: %s", todo_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the todo. Please try again.",
                context={"todo_id": todo_id, "error_type": type(e).__name__},
            ) from e

        if todo is None:
            raise NotFoundError(resource="todo", resource_id=str(todo_id))

        logger.info("Todo %s toggled (completed=%s)", todo.id, todo.completed)
        return TodoView.model_validate(todo)

    async def delete_todo(self, db: AsyncSession, todo_id: int) -> int:
        """
        Remove one todo. A missing id is a no-op.

        Returns:
            Number of rows deleted (0 or 1)

        Raises:
            DatabaseError: Delete failed (→ 500)
        """
        stmt = (
            delete(Todo)
            .where(Todo.id == todo_id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(stmt)
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error deleting todo %s: %s", todo_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the todo. Please try again.",
                context={"todo_id": todo_id, "error_type": type(e).__name__},
            ) from e

        deleted = result.rowcount or 0
        if deleted:
            logger.info("Todo %s deleted", todo_id)
        else:
            logger.debug("Delete of missing todo %s ignored", todo_id)
        return deleted


todo_service = TodoService()

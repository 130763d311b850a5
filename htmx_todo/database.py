"""
HTMX Todos: Database Handle & Session Management
==================================================

What:  Async SQLAlchemy engine, session factory and the FastAPI session dependency.
How:   `Database` wraps one engine and one session factory. The app factory
       builds exactly one instance per process and stores it on
       `app.state.database`; `get_db_session` reaches it through the request,
       so nothing here is a module-level singleton.
Who:   main.py (construction, lifespan), route handlers (via Depends),
       health route (ping), tests (temporary SQLite databases).

Session lifecycle (per request):
    open → service runs its statement and commits → close (connection back
    to the pool); a raised exception rolls back first
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from htmx_todo.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object between the models, `Database.create_all()`
    and Alembic's autogenerate.
    """
    pass


class Database:
    """
    Process-wide persistence handle.

    Attributes:
        engine:          AsyncEngine owning the connection pool
        session_factory: async_sessionmaker producing one AsyncSession per request
    """

    def __init__(self, settings: Settings):
        engine_kwargs = {
            # SQL echo only in DEBUG; very noisy otherwise
            "echo": settings.log_level == "DEBUG",
        }
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )

        self.url = settings.database_url
        self.engine: AsyncEngine = create_async_engine(settings.database_url, **engine_kwargs)

        # expire_on_commit=False: the new row stays readable after the
        # service commits, without a second SELECT.
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create missing tables for every model registered on Base."""
        # Models register themselves on import
        from htmx_todo.models import todo  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured (%d tables)", len(Base.metadata.tables))

    async def ping(self) -> None:
        """Run `SELECT 1`; raises whatever the driver raises when unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close every pooled connection. Called at application shutdown."""
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide one session, committing on success and rolling back on error.

        Raises:
            Whatever the caller raised, after rollback, so the global
            exception handlers can map it to a response.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Writes are committed by TodoService before the handler returns, so a
    failing commit still reaches the exception handlers. This teardown may
    run after the response is sent; it only rolls back what a failed
    handler left open and closes the session.

    Example usage in a route:
        @router.get("/todos")
        async def list_todos(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise

"""
CatVote: Store and Session Management
=====================================

What:  The `Store` handle (async SQLAlchemy engine + session factory over one
       SQLite file), the declarative `Base`, and the FastAPI session dependency.
How:   `Store` is constructed explicitly and handed to the app factory, which
       parks it on `app.state.store`. Each request gets its own session that
       commits on success and rolls back on error.
Who:   Built in `catvote.main`; used by route handlers via Depends().
When:  Tables are created on startup; sessions are created per-request.

SQLite specifics:
    - PRAGMA foreign_keys=ON is issued on every new DBAPI connection, so a
      vote can never reference a cat that does not exist.
    - The driver's implicit transaction handling is switched off and BEGIN is
      emitted by SQLAlchemy instead, which keeps SAVEPOINT (used by seeding)
      working correctly.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models share this metadata; `Store.create_tables()` creates every
    table registered here.
    """
    pass


def _on_connect(dbapi_connection, connection_record) -> None:
    # Autocommit at the driver level; SQLAlchemy issues BEGIN itself (see _on_begin)
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _on_begin(conn) -> None:
    conn.exec_driver_sql("BEGIN")


class Store:
    """
    Explicit handle on the single-file relational store.

    Attributes:
        database_url:    SQLAlchemy URL (sqlite+aiosqlite:///path)
        engine:          AsyncEngine managing the connection pool
        session_factory: Creates AsyncSession instances bound to the engine

    Example:
        store = Store("sqlite+aiosqlite:///./database.db")
        await store.create_tables()
        async with store.session() as db:
            ...
        await store.dispose()
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.engine: AsyncEngine = create_async_engine(database_url, echo=echo)

        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _on_connect)
            event.listen(self.engine.sync_engine, "begin", _on_begin)

        # expire_on_commit=False: attributes stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_tables(self) -> None:
        """
        Create cats, votes and monthly_winners if they do not exist yet.

        Idempotent: safe to run on every startup. There are no migrations;
        existing tables are left untouched.
        """
        # Registers every model with Base.metadata
        from catvote import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Store schema ready at %s", self.database_url)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Standalone session scope for jobs and scripts outside a request."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        """Close every pooled connection (called on shutdown)."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Looks up the Store on app.state (set by create_app)
        2. Yields a fresh session to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global handlers
        5. Always: closes the session

    Example usage in a route:
        @router.get("/cats")
        async def list_cats(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    store: Store = request.app.state.store
    async with store.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

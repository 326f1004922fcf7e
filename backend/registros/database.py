"""
Registros API - Database Engine & Session Management
=====================================================

What:  Async SQLAlchemy engine, session factory, and schema bootstrap for the
       single-file SQLite database.
How:   `Database` wraps one engine and one session factory. It is created in
       the application lifespan, stored on `app.state` through the RecordStore,
       and disposed at shutdown. Nothing here is created at import time.
Who:   Owned by RecordStore; driven by the lifespan in main.py.

Connection Notes:
    The aiosqlite driver runs each connection on its own worker thread, so
    queries never block the event loop. SQLite serializes writers with its own
    file lock; this module adds no locking of its own.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shares one metadata object)."""
    pass


class Database:
    """
    Owns the async engine and hands out sessions.

    Lifecycle:
        db = Database(url)
        await db.create_schema()   # startup, idempotent
        async with db.session() as session: ...
        await db.dispose()         # shutdown
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.url = make_url(database_url)
        self.engine: AsyncEngine = create_async_engine(database_url, echo=echo)
        # expire_on_commit=False: rows stay readable after the session commits
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def _ensure_parent_directory(self) -> None:
        """Creates the directory holding the database file, if any."""
        database = self.url.database
        if not database or database == ":memory:":
            return
        Path(database).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)

    async def create_schema(self) -> None:
        """
        Create every mapped table that does not exist yet.

        What:  CREATE TABLE IF NOT EXISTS for all models registered on Base.
        When:  On every startup. Safe to repeat; existing tables and rows are
               left untouched.
        """
        # Models register themselves on Base.metadata when imported
        from registros.models import record  # noqa: F401

        self._ensure_parent_directory()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready at %s", self.url.render_as_string(hide_password=True))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a session that rolls back on error and always closes.

        Callers commit explicitly; a session that leaves the block without
        committing has its transaction discarded.
        """
        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> None:
        """Run `SELECT 1`; raises whatever the driver raises on failure."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()

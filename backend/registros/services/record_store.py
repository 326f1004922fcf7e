"""
Registros API - Record Store (Storage Adapter)
===============================================

What:  The only component that talks to the `registros` table.
How:   Five operations, each one SQL statement in its own session and
       transaction. No caching, no batching, no retries.
Who:   Created in the application lifespan and injected into route handlers
       through `registros.dependencies.get_record_store`.

Contract:
    list_all()                                  → List[Record]
    get_by_id(id)                               → Optional[Record]   (None = not found)
    insert(title, description)                  → Record             (completed = 0)
    update(id, title, description, completed)   → int                (rows affected, 0 or 1)
    delete(id)                                  → int                (rows affected, 0 or 1)

    Interpreting None / 0 as "not found" is the caller's job. An id outside
    the SQLite INTEGER range cannot match a row, so it is answered as not
    found without a query. Every driver failure is re-raised as DatabaseError
    with the driver message attached.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from registros.database import Database
from registros.exceptions import DatabaseError
from registros.models.record import Record

logger = logging.getLogger(__name__)

# Signed 64-bit: the widest value SQLite stores in an INTEGER column
SQLITE_INTEGER_MIN = -(2 ** 63)
SQLITE_INTEGER_MAX = 2 ** 63 - 1

# The sqlite3 driver raises OverflowError, not a DBAPI error, when binding a
# Python int outside the INTEGER range
STORAGE_ERRORS = (SQLAlchemyError, OverflowError)


def _storable_id(record_id: int) -> bool:
    return SQLITE_INTEGER_MIN <= record_id <= SQLITE_INTEGER_MAX


def _driver_message(exc: Exception) -> str:
    """Returns the underlying DBAPI message when there is one."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


class RecordStore:
    """CRUD over the `registros` table."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def _fail(self, operation: str, exc: Exception) -> DatabaseError:
        message = _driver_message(exc)
        logger.error("Storage operation '%s' failed: %s", operation, message)
        return DatabaseError(operation=operation, driver_message=message)

    async def list_all(self) -> List[Record]:
        """All records in the store's natural scan order."""
        try:
            async with self.database.session() as session:
                result = await session.execute(select(Record))
                return list(result.scalars().all())
        except STORAGE_ERRORS as e:
            raise self._fail("list_all", e) from e

    async def get_by_id(self, record_id: int) -> Optional[Record]:
        """The record with this id, or None."""
        if not _storable_id(record_id):
            return None
        try:
            async with self.database.session() as session:
                result = await session.execute(select(Record).where(Record.id == record_id))
                return result.scalar_one_or_none()
        except STORAGE_ERRORS as e:
            raise self._fail("get_by_id", e) from e

    async def insert(self, title: str, description: Optional[str] = None) -> Record:
        """
        Create a record with completed = 0.

        The returned instance carries the id SQLite assigned. Title presence is
        checked by the route before this is called; the NOT NULL column is the
        only guard at this level.
        """
        try:
            async with self.database.session() as session:
                record = Record(title=title, description=description, completed=0)
                session.add(record)
                await session.commit()
                logger.debug("Inserted record %s", record.id)
                return record
        except STORAGE_ERRORS as e:
            raise self._fail("insert", e) from e

    async def update(
        self,
        record_id: int,
        title: Optional[str],
        description: Optional[str],
        completed: Optional[int],
    ) -> int:
        """
        Overwrite every field of one record.

        Full replace: None values are written as NULL. Returns the number of
        rows affected; 0 means no record has this id.
        """
        if not _storable_id(record_id):
            return 0
        try:
            async with self.database.session() as session:
                result = await session.execute(
                    update(Record)
                    .where(Record.id == record_id)
                    .values(title=title, description=description, completed=completed)
                )
                await session.commit()
                return result.rowcount
        except STORAGE_ERRORS as e:
            raise self._fail("update", e) from e

    async def delete(self, record_id: int) -> int:
        """Remove one record; returns rows affected (0 = no such id)."""
        if not _storable_id(record_id):
            return 0
        try:
            async with self.database.session() as session:
                result = await session.execute(delete(Record).where(Record.id == record_id))
                await session.commit()
                return result.rowcount
        except STORAGE_ERRORS as e:
            raise self._fail("delete", e) from e

    async def ping(self) -> bool:
        """True when the database answers `SELECT 1`."""
        try:
            await self.database.ping()
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def close(self) -> None:
        await self.database.dispose()

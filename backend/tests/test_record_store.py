"""
Registros API - Record Store Tests
===================================

What:  Tests for RecordStore against a real temporary SQLite file.

What we test:
    ✅ Schema creation is idempotent and uses the deployed column names
    ✅ insert assigns increasing ids and completed = 0
    ✅ get_by_id returns None for unknown ids
    ✅ update rewrites every field and reports rows affected
    ✅ delete reports rows affected and ids are never reused
    ✅ ids outside the SQLite INTEGER range are not found, without a query
    ✅ driver failures surface as DatabaseError with the driver message
"""

import pytest
from sqlalchemy import text

from registros.database import Database
from registros.exceptions import DatabaseError
from registros.services.record_store import (
    SQLITE_INTEGER_MAX,
    SQLITE_INTEGER_MIN,
    RecordStore,
)


class TestSchema:
    """Tests for Database.create_schema()."""

    @pytest.mark.asyncio
    async def test_create_schema_is_idempotent(self, database, record_store):
        """Running create_schema again keeps existing rows."""
        await record_store.insert("Keep me")

        await database.create_schema()

        records = await record_store.list_all()
        assert [r.title for r in records] == ["Keep me"]

    @pytest.mark.asyncio
    async def test_table_uses_original_column_names(self, database):
        async with database.engine.connect() as conn:
            result = await conn.execute(text("PRAGMA table_info(registros)"))
            columns = [row[1] for row in result.fetchall()]

        assert columns == ["id", "titulo", "descricao", "concluida"]

    @pytest.mark.asyncio
    async def test_creates_missing_parent_directory(self, tmp_path):
        db_file = tmp_path / "nested" / "dir" / "registros.db"
        db = Database(f"sqlite+aiosqlite:///{db_file}")
        try:
            await db.create_schema()
        finally:
            await db.dispose()

        assert db_file.exists()


class TestInsertAndGet:
    """Tests for insert, get_by_id and list_all."""

    @pytest.mark.asyncio
    async def test_insert_returns_full_record(self, record_store):
        record = await record_store.insert("Buy milk")

        assert record.id == 1
        assert record.title == "Buy milk"
        assert record.description is None
        assert record.completed == 0

    @pytest.mark.asyncio
    async def test_insert_assigns_increasing_ids(self, record_store):
        first = await record_store.insert("one")
        second = await record_store.insert("two", "second")

        assert second.id > first.id

    @pytest.mark.asyncio
    async def test_get_by_id_round_trip(self, record_store):
        created = await record_store.insert("Read book", "chapter 3")

        fetched = await record_store.get_by_id(created.id)

        assert fetched is not None
        assert (fetched.id, fetched.title, fetched.description, fetched.completed) == (
            created.id, "Read book", "chapter 3", 0,
        )

    @pytest.mark.asyncio
    async def test_get_by_id_missing_returns_none(self, record_store):
        assert await record_store.get_by_id(999) is None

    @pytest.mark.asyncio
    async def test_list_all_empty(self, record_store):
        assert await record_store.list_all() == []

    @pytest.mark.asyncio
    async def test_list_all_returns_every_record(self, record_store):
        for title in ("a", "b", "c"):
            await record_store.insert(title)

        records = await record_store.list_all()

        assert sorted(r.title for r in records) == ["a", "b", "c"]


class TestUpdateAndDelete:
    """Tests for update and delete row counts."""

    @pytest.mark.asyncio
    async def test_update_rewrites_all_fields(self, record_store):
        created = await record_store.insert("Buy milk", "whole")

        affected = await record_store.update(created.id, "Buy milk", "2L", 1)

        assert affected == 1
        fetched = await record_store.get_by_id(created.id)
        assert (fetched.title, fetched.description, fetched.completed) == ("Buy milk", "2L", 1)

    @pytest.mark.asyncio
    async def test_update_with_none_stores_null(self, record_store):
        """Full replace: omitted values become NULL, not the previous value."""
        created = await record_store.insert("Buy milk", "whole")

        await record_store.update(created.id, "Buy bread", None, None)

        fetched = await record_store.get_by_id(created.id)
        assert fetched.title == "Buy bread"
        assert fetched.description is None
        assert fetched.completed is None

    @pytest.mark.asyncio
    async def test_update_missing_returns_zero(self, record_store):
        assert await record_store.update(42, "x", None, 0) == 0

    @pytest.mark.asyncio
    async def test_delete_existing_then_missing(self, record_store):
        created = await record_store.insert("temp")

        assert await record_store.delete(created.id) == 1
        assert await record_store.get_by_id(created.id) is None
        assert await record_store.delete(created.id) == 0

    @pytest.mark.asyncio
    async def test_deleted_ids_are_not_reused(self, record_store):
        first = await record_store.insert("first")
        await record_store.delete(first.id)

        second = await record_store.insert("second")

        assert second.id > first.id


class TestOutOfRangeIds:
    """Ids SQLite cannot store behave like any other missing id."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "record_id", [SQLITE_INTEGER_MAX + 1, SQLITE_INTEGER_MIN - 1, 2 ** 200]
    )
    async def test_lookups_report_not_found(self, record_store, record_id):
        await record_store.insert("only row")

        assert await record_store.get_by_id(record_id) is None
        assert await record_store.update(record_id, "x", None, 0) == 0
        assert await record_store.delete(record_id) == 0
        assert len(await record_store.list_all()) == 1

    @pytest.mark.asyncio
    async def test_range_bounds_are_queried(self, record_store):
        for record_id in (SQLITE_INTEGER_MAX, SQLITE_INTEGER_MIN):
            assert await record_store.get_by_id(record_id) is None
            assert await record_store.delete(record_id) == 0


class TestStorageErrors:
    """Driver failures are wrapped in DatabaseError."""

    @pytest.mark.asyncio
    async def test_missing_table_raises_database_error(self, database, record_store):
        async with database.engine.begin() as conn:
            await conn.execute(text("DROP TABLE registros"))

        with pytest.raises(DatabaseError) as exc_info:
            await record_store.list_all()

        assert exc_info.value.operation == "list_all"
        assert "no such table" in exc_info.value.driver_message

    @pytest.mark.asyncio
    async def test_not_null_violation_raises_database_error(self, record_store):
        created = await record_store.insert("title")

        with pytest.raises(DatabaseError) as exc_info:
            await record_store.update(created.id, None, None, None)

        assert exc_info.value.operation == "update"
        assert "NOT NULL" in exc_info.value.driver_message

    @pytest.mark.asyncio
    async def test_ping(self, record_store):
        assert await record_store.ping() is True

    @pytest.mark.asyncio
    async def test_ping_unreachable_database(self, tmp_path):
        # A directory cannot be opened as a database file
        store = RecordStore(Database(f"sqlite+aiosqlite:///{tmp_path}"))
        try:
            assert await store.ping() is False
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_value_too_large_raises_database_error(self, record_store):
        created = await record_store.insert("title")

        with pytest.raises(DatabaseError) as exc_info:
            await record_store.update(created.id, "title", None, 2 ** 64)

        assert exc_info.value.operation == "update"
        assert "too large" in exc_info.value.driver_message
        fetched = await record_store.get_by_id(created.id)
        assert fetched.completed == 0

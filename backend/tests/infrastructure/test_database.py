"""Connection Pool — verifies raw query results and driver error mapping.

Invariants checked:
    - query() returns dict rows for SELECT and rowcount for DML
    - IntegrityError / OperationalError become PersistenceError with the operation name
    - a failed statement rolls back its scope
    - get_pool refuses to run before the lifespan created a pool
"""

from types import SimpleNamespace

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.errors import PersistenceError
from app.infrastructure.database import ConnectionPool, get_pool


@pytest.fixture
async def pool():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    db_pool = ConnectionPool(engine)
    async with db_pool.connect() as conn:
        await conn.query("CREATE TABLE notes (id INTEGER PRIMARY KEY, body TEXT NOT NULL)")
    yield db_pool
    await db_pool.dispose()


async def test_query_returns_rows_as_dicts(pool):
    async with pool.connect() as conn:
        await conn.query("INSERT INTO notes (id, body) VALUES (:id, :body)", {"id": 1, "body": "a"})
        result = await conn.query("SELECT id, body FROM notes")
    assert result.rows == [{"id": 1, "body": "a"}]


async def test_query_reports_rowcount_for_dml(pool):
    async with pool.connect() as conn:
        await conn.query("INSERT INTO notes (id, body) VALUES (1, 'a')")
        updated = await conn.query(text("UPDATE notes SET body = :body"), {"body": "b"})
        missing = await conn.query("DELETE FROM notes WHERE id = :id", {"id": 99})
    assert updated.rowcount == 1
    assert missing.rowcount == 0
    assert missing.rows == []


async def test_parameters_are_bound_not_interpolated(pool):
    hostile = "x'); DROP TABLE notes; --"
    async with pool.connect() as conn:
        await conn.query("INSERT INTO notes (id, body) VALUES (1, :body)", {"body": hostile})
        result = await conn.query("SELECT body FROM notes")
    assert result.rows == [{"body": hostile}]


async def test_integrity_error_mapped(pool):
    async with pool.connect() as conn:
        await conn.query("INSERT INTO notes (id, body) VALUES (1, 'a')")

    with pytest.raises(PersistenceError) as exc_info:
        async with pool.connect("create") as conn:
            await conn.query("INSERT INTO notes (id, body) VALUES (1, 'dup')")

    assert exc_info.value.operation == "create"
    assert isinstance(exc_info.value.cause, IntegrityError)
    assert "Integrity constraint violated" in exc_info.value.message


async def test_operational_error_mapped(pool):
    with pytest.raises(PersistenceError) as exc_info:
        async with pool.connect("fetch") as conn:
            await conn.query("SELECT * FROM missing_table")
    assert isinstance(exc_info.value.cause, OperationalError)


async def test_failed_scope_rolls_back(pool):
    with pytest.raises(PersistenceError):
        async with pool.connect() as conn:
            await conn.query("INSERT INTO notes (id, body) VALUES (1, 'a')")
            await conn.query("INSERT INTO notes (id, body) VALUES (1, 'dup')")

    async with pool.connect() as conn:
        result = await conn.query("SELECT COUNT(*) AS n FROM notes")
    assert result.rows[0]["n"] == 0


async def test_health_check(pool):
    assert await pool.health_check() is True


def test_get_pool_requires_initialized_state():
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))
    with pytest.raises(RuntimeError, match="Database not initialized"):
        get_pool(request)

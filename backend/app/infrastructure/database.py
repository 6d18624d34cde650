"""Database Connection Pool — async pooled connections for raw parameterized SQL.

Invariants:
    - One statement per acquired connection scope unless the caller runs several
      sequentially (read queries); each scope commits on success, rolls back on error
    - Connections are released on every exit path (success, validation failure, error)
    - Parameters are always bound — SQL text is never built by string interpolation
    - All SQLAlchemy exceptions mapped to PersistenceError (core/errors.py)

Design Decisions:
    - Pool is constructed in the FastAPI lifespan, stored on app.state and injected
      with Depends(get_pool); disposed on shutdown (no module-level singleton)
    - ConnectionPool wraps an AsyncEngine: tests hand it an in-memory SQLite engine
    - text() over ORM queries: the SQL is the contract, the driver only binds values
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.sql.elements import TextClause

from app.core.errors import PersistenceError
from app.infrastructure.observability import log_context

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    rows: list[dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0


class Connection:
    """A pooled connection checked out for the duration of one `connect()` scope."""

    def __init__(self, conn: AsyncConnection):
        self._conn = conn

    async def query(
        self, sql: str | TextClause, params: dict[str, Any] | None = None,
    ) -> QueryResult:
        """Execute one statement with bound parameters."""
        statement = text(sql) if isinstance(sql, str) else sql
        result = await self._conn.execute(statement, params or {})
        if result.returns_rows:
            return QueryResult(
                rows=[dict(row) for row in result.mappings().all()],
                rowcount=result.rowcount,
            )
        return QueryResult(rowcount=result.rowcount)


class ConnectionPool:
    """Shared pool of database connections with health checks."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @classmethod
    def from_url(
        cls, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ) -> "ConnectionPool":
        engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        return cls(engine)

    @asynccontextmanager
    async def connect(self, operation: str = "query") -> AsyncGenerator[Connection, None]:
        """Check out a connection; released and error-mapped on exit."""
        try:
            async with self.engine.begin() as conn:
                yield Connection(conn)
        except IntegrityError as e:
            logger.error(f"DB integrity error: {e}", extra=log_context(operation))
            raise PersistenceError("Integrity constraint violated", operation, cause=e) from e
        except OperationalError as e:
            logger.error(f"DB operational error: {e}", extra=log_context(operation))
            raise PersistenceError("Connection or operational error", operation, cause=e) from e
        except DBAPIError as e:
            logger.error(f"DB driver error: {e}", extra=log_context(operation))
            raise PersistenceError("Database driver error", operation, cause=e) from e
        except SQLAlchemyError as e:
            logger.error(f"SQLAlchemy error: {e}", extra=log_context(operation))
            raise PersistenceError("Database operation failed", operation, cause=e) from e

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.connect("health_check") as conn:
                await conn.query("SELECT 1")
            return True
        except PersistenceError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        """Close every pooled connection (process shutdown)."""
        await self.engine.dispose()


def get_pool(request: Request) -> ConnectionPool:
    """FastAPI dependency for the application's connection pool."""
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise RuntimeError("Database not initialized")
    return pool

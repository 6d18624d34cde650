"""Boundary Protocols — contracts between the write pipeline and its collaborators.

Invariants:
    - Services depend on these Protocols, never on a concrete engine or cache
    - A Store hands out connections only inside an async context (release on exit)
    - Implementations provided by the shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy — test doubles
      need no base class
    - Async in Protocol: connection methods do IO; core pure functions never await
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol


class QueryResultLike(Protocol):
    rows: list[dict[str, Any]]
    rowcount: int


class ConnectionLike(Protocol):
    """A checked-out store connection."""
    async def query(
        self, sql: Any, params: dict[str, Any] | None = None,
    ) -> QueryResultLike: ...


class Store(Protocol):
    """Contract for the pooled relational store — implemented by infrastructure."""
    def connect(
        self, operation: str = "query",
    ) -> AbstractAsyncContextManager[ConnectionLike]: ...


class ViewInvalidator(Protocol):
    """Contract for the rendering cache — discards cached views under a path."""
    def invalidate(self, path: str) -> int: ...

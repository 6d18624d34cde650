"""View Cache — in-process cache of rendered dashboard views, keyed by logical path.

Invariants:
    - Keys are a view path optionally followed by "?" and a query string
    - invalidate(path) removes the path itself and every key nested under it
    - Cached payloads are returned as stored (callers must not mutate them)
    - Every invalidate bumps `generation`; put() with a generation older than the
      current one is dropped, so a read that raced a write never caches stale rows
    - Query values are URL-encoded in keys ("a&b" cannot forge a second parameter)

Design Decisions:
    - Plain dict, no TTL: views only change through the write pipeline, which
      always invalidates (single-process uvicorn; multi-worker would need a shared store)
    - Path-prefix invalidation so one signal covers every page/filter of a listing
"""

import logging
from typing import Any
from urllib.parse import urlencode

from fastapi import Request

logger = logging.getLogger(__name__)


def view_key(path: str, **query: object) -> str:
    """Build a cache key from a view path and its query parameters."""
    if not query:
        return path
    return f"{path}?{urlencode(sorted(query.items()))}"


class ViewCache:
    """Cached view payloads with path-based invalidation."""

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}
        self._generation = 0

    @property
    def generation(self) -> int:
        """Invalidation counter; read it before rendering a view you intend to put()."""
        return self._generation

    def get(self, key: str) -> Any | None:
        return self._entries.get(key)

    def put(self, key: str, payload: Any, generation: int | None = None) -> bool:
        """Store a payload unless an invalidation happened since `generation` was read."""
        if generation is not None and generation != self._generation:
            logger.debug(f"Discarded stale view {key} (generation {generation})")
            return False
        self._entries[key] = payload
        return True

    def invalidate(self, path: str) -> int:
        """Drop every cached view under `path`. Returns how many entries were removed."""
        self._generation += 1
        stale = [
            key for key in self._entries
            if key == path or key.startswith(path + "?") or key.startswith(path + "/")
        ]
        for key in stale:
            del self._entries[key]
        logger.info(f"Invalidated {len(stale)} cached view(s) under {path}")
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)


def get_view_cache(request: Request) -> ViewCache:
    """FastAPI dependency for the application's view cache."""
    cache = getattr(request.app.state, "view_cache", None)
    if cache is None:
        raise RuntimeError("View cache not initialized")
    return cache

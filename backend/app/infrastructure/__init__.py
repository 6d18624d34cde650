"""Infrastructure Layer — connection pool, view cache, and logging setup.

Invariants:
    - Infrastructure never imports domain logic beyond core/errors.py
    - All driver exceptions mapped to PersistenceError at the pool boundary

Design Decisions:
    - app-scoped resources created in the FastAPI lifespan, never at import time
"""

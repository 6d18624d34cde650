"""Root conftest — shared test configuration."""

import os

# Settings require a database; tests never reach a real PostgreSQL server
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("LOG_FORMAT", "text")

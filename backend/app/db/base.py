"""SQLAlchemy Declarative Base — shared base class and column defaults for table metadata.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata (create_all, alembic)
    - Primary keys are generated by the database, never by application code

Design Decisions:
    - Separate file for Base: avoids circular imports between models
    - generated_id() compiles per dialect: gen_random_uuid() on PostgreSQL,
      random hex on SQLite (test database)
"""

from sqlalchemy import String
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql.expression import FunctionElement


class Base(DeclarativeBase):
    """Base class for all dashboard ORM models."""
    pass


class generated_id(FunctionElement):
    """Server-side default for text primary keys."""
    type = String()
    inherit_cache = True


@compiles(generated_id)
def _generated_id_default(element, compiler, **kw):
    return "gen_random_uuid()::text"


@compiles(generated_id, "sqlite")
def _generated_id_sqlite(element, compiler, **kw):
    return "(lower(hex(randomblob(16))))"

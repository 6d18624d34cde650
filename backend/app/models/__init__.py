"""ORM Models — SQLAlchemy declarative table metadata for the dashboard schema.

Invariants:
    - All models inherit from Base (db/base.py)
    - Models describe tables only; application reads/writes use raw SQL

Design Decisions:
    - One file per table for locality
    - All models imported here so Base.metadata is complete for create_all and alembic
"""

from app.models.customer import Customer  # noqa: F401
from app.models.invoice import Invoice  # noqa: F401
from app.models.revenue import Revenue  # noqa: F401
from app.models.user import User  # noqa: F401

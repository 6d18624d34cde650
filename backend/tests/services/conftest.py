"""Service test fixtures — in-memory SQLite store, view cache, and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the full schema
    - get_pool / get_view_cache dependencies overridden with the test instances
    - Customers c1 (Evil Rabbit) and c2 (Lee Robinson) seeded on request
    - Login account u1 (user@nextmail.com / 123456) seeded on request

Design Decisions:
    - SQLite in-memory over PostgreSQL: fast, no external service; the SQL in
      services/ is written to run on both
    - StaticPool: every checkout reuses the single in-memory connection
"""

import bcrypt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import Date, bindparam, text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.infrastructure.database import ConnectionPool, get_pool
from app.infrastructure.view_cache import ViewCache, get_view_cache
from app.main import app
from app.models import Invoice  # noqa: F401

CUSTOMERS = [
    {
        "id": "c1", "name": "Evil Rabbit", "email": "evil@rabbit.com",
        "image_url": "/customers/evil-rabbit.png",
    },
    {
        "id": "c2", "name": "Lee Robinson", "email": "lee@robinson.com",
        "image_url": "/customers/lee-robinson.png",
    },
]

INSERT_CUSTOMER = text(
    "INSERT INTO customers (id, name, email, image_url) "
    "VALUES (:id, :name, :email, :image_url)",
)

USER = {
    "id": "u1", "name": "User", "email": "user@nextmail.com", "password": "123456",
}

INSERT_USER = text(
    "INSERT INTO users (id, name, email, password) VALUES (:id, :name, :email, :password)",
)

INSERT_INVOICE_ROW = text(
    "INSERT INTO invoices (id, customer_id, amount, status, date) "
    "VALUES (:id, :customer_id, :amount, :status, :date)",
).bindparams(bindparam("date", type_=Date))


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def pool(test_engine):
    return ConnectionPool(test_engine)


@pytest.fixture
def view_cache():
    return ViewCache()


@pytest.fixture
async def seed_customers(pool):
    async with pool.connect() as conn:
        for customer in CUSTOMERS:
            await conn.query(INSERT_CUSTOMER, customer)
    return CUSTOMERS


@pytest.fixture
async def seed_user(pool):
    """Login account u1; password stored as a low-cost bcrypt hash."""
    hashed = bcrypt.hashpw(USER["password"].encode(), bcrypt.gensalt(rounds=4)).decode()
    async with pool.connect() as conn:
        await conn.query(INSERT_USER, {**USER, "password": hashed})
    return USER


@pytest.fixture
def insert_invoice(pool):
    """Insert an invoice row directly (bypasses the write pipeline)."""
    async def _insert(invoice_id, customer_id, amount, status, date):
        async with pool.connect() as conn:
            await conn.query(INSERT_INVOICE_ROW, {
                "id": invoice_id, "customer_id": customer_id,
                "amount": amount, "status": status, "date": date,
            })
    return _insert


@pytest.fixture
def invoice_rows(pool):
    """Read every invoice row as stored."""
    async def _rows():
        async with pool.connect() as conn:
            result = await conn.query(
                "SELECT id, customer_id, amount, status, date FROM invoices",
            )
        return result.rows
    return _rows


@pytest.fixture
def drop_invoices_table(pool):
    """Make every statement against invoices fail."""
    async def _drop():
        async with pool.connect() as conn:
            await conn.query("DROP TABLE invoices")
    return _drop


@pytest.fixture
async def client(pool, view_cache):
    """FastAPI test client with pool and view cache overridden."""
    app.dependency_overrides[get_pool] = lambda: pool
    app.dependency_overrides[get_view_cache] = lambda: view_cache

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()

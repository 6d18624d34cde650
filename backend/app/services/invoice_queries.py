"""Invoice Queries — dashboard reads over raw parameterized SQL.

Invariants:
    - One pooled connection per public method; several statements run sequentially on it
    - Search filters are case-insensitive substring matches, always bound as parameters
    - Amounts leave this module formatted as currency, except fetch_invoice_by_id which
      returns dollars as Decimal for the edit form
    - Dates leave this module as ISO-8601 strings
    - Failures surface as PersistenceError carrying a user-facing message

Design Decisions:
    - LOWER(...) LIKE and CAST(... AS TEXT) over ILIKE / ::text: same SQL runs on
      PostgreSQL and on the SQLite test database
    - Card counts run sequentially on one connection: asyncpg connections do not
      multiplex concurrent statements
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from app.core.domain_types import InvoiceId
from app.core.errors import PersistenceError, ResourceNotFoundError
from app.core.invoice_record import (
    ITEMS_PER_PAGE, LATEST_INVOICES_LIMIT,
    cents_to_amount, format_currency, search_pattern, total_pages,
)
from app.core.repository_protocols import Store
from app.infrastructure.observability import log_context

logger = logging.getLogger(__name__)

_INVOICE_SEARCH = """
    LOWER(customers.name) LIKE :pattern OR
    LOWER(customers.email) LIKE :pattern OR
    CAST(invoices.amount AS TEXT) LIKE :pattern OR
    CAST(invoices.date AS TEXT) LIKE :pattern OR
    LOWER(invoices.status) LIKE :pattern
"""

FETCH_REVENUE = "SELECT month, revenue FROM revenue"

FETCH_LATEST_INVOICES = """
    SELECT invoices.amount, customers.name, customers.image_url, customers.email, invoices.id
    FROM invoices
    JOIN customers ON invoices.customer_id = customers.id
    ORDER BY invoices.date DESC
    LIMIT :limit
"""

COUNT_INVOICES = "SELECT COUNT(*) AS count FROM invoices"
COUNT_CUSTOMERS = "SELECT COUNT(*) AS count FROM customers"
SUM_INVOICES_BY_STATUS = """
    SELECT
        SUM(CASE WHEN status = 'paid' THEN amount ELSE 0 END) AS paid,
        SUM(CASE WHEN status = 'pending' THEN amount ELSE 0 END) AS pending
    FROM invoices
"""

FETCH_FILTERED_INVOICES = f"""
    SELECT
        invoices.id,
        invoices.amount,
        invoices.date,
        invoices.status,
        customers.name,
        customers.email,
        customers.image_url
    FROM invoices
    JOIN customers ON invoices.customer_id = customers.id
    WHERE {_INVOICE_SEARCH}
    ORDER BY invoices.date DESC
    LIMIT :limit OFFSET :offset
"""

COUNT_FILTERED_INVOICES = f"""
    SELECT COUNT(*) AS count
    FROM invoices
    JOIN customers ON invoices.customer_id = customers.id
    WHERE {_INVOICE_SEARCH}
"""

FETCH_INVOICE_BY_ID = """
    SELECT invoices.id, invoices.customer_id, invoices.amount, invoices.status
    FROM invoices
    WHERE invoices.id = :id
"""

FETCH_CUSTOMERS = "SELECT id, name FROM customers ORDER BY name ASC"

FETCH_FILTERED_CUSTOMERS = """
    SELECT
        customers.id,
        customers.name,
        customers.email,
        customers.image_url,
        COUNT(invoices.id) AS total_invoices,
        SUM(CASE WHEN invoices.status = 'pending' THEN invoices.amount ELSE 0 END) AS total_pending,
        SUM(CASE WHEN invoices.status = 'paid' THEN invoices.amount ELSE 0 END) AS total_paid
    FROM customers
    LEFT JOIN invoices ON customers.id = invoices.customer_id
    WHERE
        LOWER(customers.name) LIKE :pattern OR
        LOWER(customers.email) LIKE :pattern
    GROUP BY customers.id, customers.name, customers.email, customers.image_url
    ORDER BY customers.name ASC
"""


def _iso(value: Any) -> str:
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


class InvoiceQueries:
    """Read side of the dashboard."""

    def __init__(self, store: Store):
        self.store = store

    @asynccontextmanager
    async def _connect(self, operation: str, failure_message: str):
        try:
            async with self.store.connect(operation) as conn:
                yield conn
        except PersistenceError as e:
            e.context.user_message = failure_message
            logger.error(
                f"Database Error: {failure_message}",
                extra=log_context(operation, error_code=e.code),
            )
            raise

    async def fetch_revenue(self) -> list[dict]:
        async with self._connect("fetch_revenue", "Failed to fetch revenue data.") as conn:
            result = await conn.query(FETCH_REVENUE)
        return result.rows

    async def fetch_latest_invoices(self) -> list[dict]:
        async with self._connect(
            "fetch_latest_invoices", "Failed to fetch the latest invoices.",
        ) as conn:
            result = await conn.query(
                FETCH_LATEST_INVOICES, {"limit": LATEST_INVOICES_LIMIT},
            )
        return [
            {**row, "amount": format_currency(row["amount"])}
            for row in result.rows
        ]

    async def fetch_card_data(self) -> dict:
        """Counts and paid/pending totals for the overview cards."""
        async with self._connect("fetch_card_data", "Failed to fetch card data.") as conn:
            invoice_count = await conn.query(COUNT_INVOICES)
            customer_count = await conn.query(COUNT_CUSTOMERS)
            status_totals = await conn.query(SUM_INVOICES_BY_STATUS)

        totals = status_totals.rows[0]
        return {
            "number_of_invoices": int(invoice_count.rows[0]["count"] or 0),
            "number_of_customers": int(customer_count.rows[0]["count"] or 0),
            "total_paid_invoices": format_currency(totals["paid"]),
            "total_pending_invoices": format_currency(totals["pending"]),
        }

    async def fetch_filtered_invoices(
        self, query: str, current_page: int,
    ) -> list[dict]:
        """One page of invoices matching `query`, newest first."""
        offset = (current_page - 1) * ITEMS_PER_PAGE
        async with self._connect(
            "fetch_filtered_invoices", "Failed to fetch invoices.",
        ) as conn:
            result = await conn.query(
                FETCH_FILTERED_INVOICES,
                {
                    "pattern": search_pattern(query),
                    "limit": ITEMS_PER_PAGE,
                    "offset": offset,
                },
            )
        return [
            {
                **row,
                "amount": format_currency(row["amount"]),
                "date": _iso(row["date"]),
            }
            for row in result.rows
        ]

    async def fetch_invoices_pages(self, query: str) -> int:
        async with self._connect(
            "fetch_invoices_pages", "Failed to fetch total number of invoices.",
        ) as conn:
            result = await conn.query(
                COUNT_FILTERED_INVOICES, {"pattern": search_pattern(query)},
            )
        return total_pages(int(result.rows[0]["count"] or 0))

    async def fetch_invoice_by_id(self, invoice_id: InvoiceId) -> dict:
        """Invoice for the edit form, amount converted back to dollars."""
        async with self._connect("fetch_invoice_by_id", "Failed to fetch invoice.") as conn:
            result = await conn.query(FETCH_INVOICE_BY_ID, {"id": invoice_id})
        if not result.rows:
            raise ResourceNotFoundError("Invoice", invoice_id)
        row = result.rows[0]
        return {**row, "amount": cents_to_amount(row["amount"])}

    async def fetch_customers(self) -> list[dict]:
        async with self._connect(
            "fetch_customers", "Failed to fetch all customers.",
        ) as conn:
            result = await conn.query(FETCH_CUSTOMERS)
        return result.rows

    async def fetch_filtered_customers(self, query: str) -> list[dict]:
        async with self._connect(
            "fetch_filtered_customers", "Failed to fetch customer table.",
        ) as conn:
            result = await conn.query(
                FETCH_FILTERED_CUSTOMERS, {"pattern": search_pattern(query)},
            )
        return [
            {
                **row,
                "total_pending": format_currency(row["total_pending"]),
                "total_paid": format_currency(row["total_paid"]),
            }
            for row in result.rows
        ]

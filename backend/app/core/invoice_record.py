"""Invoice Record Mapping — pure conversions between drafts, SQL parameters and display values.

Invariants:
    - amount_to_cents rounds half-up on Decimal: 19.99 -> 1999, 0.005 -> 1, 45.50 -> 4550
    - Parameter dicts keep a fixed positional order:
        insert: (customer_id, amount, status, date)
        update: (customer_id, amount, status, id)
    - The invoice date is the server's UTC calendar date at creation, never recomputed on update
    - All functions are PURE: no IO, no clock reads (callers pass `now`)

Design Decisions:
    - Ordered dicts over tuples: SQLAlchemy text() binds by name, the order documents
      the statement's placeholder sequence and is asserted in tests
    - format_currency mirrors en-US currency formatting ($1,234.56, -$5.00)
"""

import math
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from app.core.domain_types import AmountCents, InvoiceId
from app.core.validate_invoice import InvoiceDraft


INVOICES_VIEW_PATH = "/dashboard/invoices"
ITEMS_PER_PAGE = 6
LATEST_INVOICES_LIMIT = 5

_CENT = Decimal("0.01")


def amount_to_cents(amount: Decimal) -> AmountCents:
    """Convert a major-unit amount to integer cents (round half-up)."""
    cents = (amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return AmountCents(int(cents))


def cents_to_amount(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(_CENT)


def invoice_date(now: datetime) -> date:
    """UTC calendar date for a new invoice. Naive datetimes are taken as UTC."""
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(timezone.utc).date()


def insert_params(draft: InvoiceDraft, created_on: date) -> dict[str, object]:
    return {
        "customer_id": draft.customer_id,
        "amount": amount_to_cents(draft.amount),
        "status": draft.status.value,
        "date": created_on,
    }


def update_params(invoice_id: InvoiceId, draft: InvoiceDraft) -> dict[str, object]:
    return {
        "customer_id": draft.customer_id,
        "amount": amount_to_cents(draft.amount),
        "status": draft.status.value,
        "id": invoice_id,
    }


def format_currency(cents: int | Decimal | None) -> str:
    """Format integer cents as US dollars. NULL sums render as $0.00."""
    value = (Decimal(cents or 0) / 100).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def total_pages(count: int, per_page: int = ITEMS_PER_PAGE) -> int:
    return math.ceil(count / per_page)


def search_pattern(query: str) -> str:
    """Case-insensitive substring pattern for LIKE filters."""
    return f"%{query.lower()}%"

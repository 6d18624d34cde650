"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - InvoiceId, CustomerId are opaque string keys — never parsed or generated in Python
    - AmountCents is always an integer count of minor units (never a float)
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and bind as SQL parameters without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

InvoiceId = NewType("InvoiceId", str)
CustomerId = NewType("CustomerId", str)
UserId = NewType("UserId", str)


# ─── Value Types ─────────────────────────────────────────────────

AmountCents = NewType("AmountCents", int)   # >= 1 for persisted invoices


# ─── Enums ───────────────────────────────────────────────────────

class InvoiceStatus(str, Enum):
    """Invoice states — maps to DB `status` column."""
    PENDING = "pending"
    PAID = "paid"


class ValidationKind(str, Enum):
    """Why a form field was rejected."""
    INVALID_TYPE = "InvalidType"
    INVALID_RANGE = "InvalidRange"
    INVALID_ENUM = "InvalidEnum"


class WriteOperation(str, Enum):
    """Write operations of the invoice pipeline — used in logs and errors."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

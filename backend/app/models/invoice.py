"""Invoice ORM — table metadata for persisted invoices.

Invariants:
    - id is a database-generated text key (INSERT never supplies it)
    - amount is stored in integer cents
    - status is 'pending' or 'paid' (CHECK constraint)
    - date is the UTC creation date, immutable after insert

Design Decisions:
    - Metadata only: the write pipeline issues raw parameterized INSERT/UPDATE/DELETE
    - Integer cents over NUMERIC: display formatting is done in Python
"""

import datetime

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, generated_id


class Invoice(Base):
    """Invoice issued to a customer."""
    __tablename__ = "invoices"
    __table_args__ = (
        CheckConstraint("status IN ('pending', 'paid')", name="ck_invoices_status"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, server_default=generated_id(),
    )
    customer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("customers.id"), nullable=False, index=True,
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)

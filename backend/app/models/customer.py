"""Customer ORM — table metadata for customers referenced by invoices.

Invariants:
    - id is a database-generated text key
    - email is unique per customer

Design Decisions:
    - Metadata only: rows are read and written with raw SQL (services/invoice_queries.py)
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, generated_id


class Customer(Base):
    """Billed customer."""
    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, server_default=generated_id(),
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    image_url: Mapped[str] = mapped_column(String(255), nullable=False)

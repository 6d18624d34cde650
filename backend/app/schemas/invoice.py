"""Invoice Schemas — Pydantic models for the invoice form boundary.

Invariants:
    - InvoiceForm reads the browser field names (customerId, amount, status)
    - customerId stripped, non-empty
    - amount coerced from text to Decimal, finite, at least one cent after half-up
      rounding, at most MAX_AMOUNT (the largest value the integer cents column holds)
    - status is one of InvoiceStatus
    - Unknown form fields (hidden inputs, action ids) are ignored

Design Decisions:
    - Decimal over float for amount: cents conversion must be exact
    - Aliases over renaming the HTML inputs: the form contract stays camelCase,
      Python code stays snake_case
"""

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.domain_types import InvoiceStatus

MAX_AMOUNT = Decimal("21474836.47")
_CENT = Decimal("0.01")


class InvoiceForm(BaseModel):
    """Submitted create/edit invoice form."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    customer_id: str = Field(alias="customerId")
    amount: Decimal = Field(gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    status: InvoiceStatus

    @field_validator("customer_id")
    @classmethod
    def strip_customer_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("customerId cannot be empty or whitespace")
        return v

    @field_validator("amount")
    @classmethod
    def at_least_one_cent(cls, v: Decimal) -> Decimal:
        if v.quantize(_CENT, rounding=ROUND_HALF_UP) == 0:
            raise ValueError("amount rounds to $0.00")
        return v

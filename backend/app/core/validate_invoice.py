"""Invoice Form Validation — turns raw form fields into a typed draft or field errors.

Invariants:
    - validate_invoice_fields never raises for user input: failures are returned as Invalid
    - Each failing field gets exactly one message list; passing fields get no entry
    - Messages are deduplicated per field (pydantic may report several errors per field)
    - Valid carries coerced values: Decimal amount, InvoiceStatus status

Design Decisions:
    - Pydantic does the coercion, this module only maps its errors onto the
      InvalidType / InvalidRange / InvalidEnum taxonomy with user-facing messages
    - Tagged union (Valid | Invalid) over exceptions: callers pattern-match the outcome
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Union

from pydantic import ValidationError

from app.core.domain_types import CustomerId, InvoiceStatus, ValidationKind
from app.schemas.invoice import InvoiceForm


FIELD_RULES: dict[str, tuple[ValidationKind, str]] = {
    "customerId": (ValidationKind.INVALID_TYPE, "Please select a customer."),
    "amount": (ValidationKind.INVALID_RANGE, "Please enter an amount greater than $0."),
    "status": (ValidationKind.INVALID_ENUM, "Please select an invoice status."),
}


@dataclass(frozen=True)
class InvoiceDraft:
    """User-submitted invoice fields, validated but not yet persisted."""
    customer_id: CustomerId
    amount: Decimal
    status: InvoiceStatus


@dataclass(frozen=True)
class FieldError:
    field: str
    kind: ValidationKind
    message: str


@dataclass(frozen=True)
class Valid:
    draft: InvoiceDraft


@dataclass(frozen=True)
class Invalid:
    errors: list[FieldError] = field(default_factory=list)

    @property
    def field_errors(self) -> dict[str, list[str]]:
        """Messages grouped by field, in the order fields failed."""
        grouped: dict[str, list[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped


ValidationResult = Union[Valid, Invalid]


def validate_invoice_fields(raw_fields: Mapping[str, Any]) -> ValidationResult:
    """Validate and coerce a submitted invoice form."""
    try:
        form = InvoiceForm.model_validate(dict(raw_fields))
    except ValidationError as exc:
        return Invalid(errors=_collect_field_errors(exc))
    return Valid(InvoiceDraft(
        customer_id=CustomerId(form.customer_id),
        amount=form.amount,
        status=form.status,
    ))


def _collect_field_errors(exc: ValidationError) -> list[FieldError]:
    collected: list[FieldError] = []
    seen: set[tuple[str, str]] = set()
    for error in exc.errors():
        name = str(error["loc"][0]) if error["loc"] else "form"
        kind, message = FIELD_RULES.get(
            name, (ValidationKind.INVALID_TYPE, error["msg"]),
        )
        if (name, message) in seen:
            continue
        seen.add((name, message))
        collected.append(FieldError(field=name, kind=kind, message=message))
    return collected

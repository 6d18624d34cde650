"""Invoice Actions — validated-write pipeline for create, update and delete.

Invariants:
    - Received -> Validating -> Invalid (FormState, no store access)
                             -> Valid -> Persisting -> Persisted (invalidate + Redirect)
                                                    -> Failed
    - create/update: persistence failures are logged then re-raised unchanged
    - delete: persistence failures are logged and returned as DeleteFailed (never raised)
    - Exactly one statement per action, parameters bound in fixed order
    - Successful writes always invalidate the invoices listing view

Design Decisions:
    - Asymmetric failure policy is deliberate: a create/update that silently fails must
      not report success, while a failed delete leaves the row visible and can be retried
      in place from the listing
    - update of an unknown id affects zero rows and still succeeds (no existence check);
      logged at warning level so the gap is observable
    - Outcomes are values (Redirect, FormState, DeleteSucceeded, DeleteFailed): the route
      layer decides how to render them
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Union

from sqlalchemy import Date, bindparam, text

from app.core.domain_types import InvoiceId, WriteOperation
from app.core.errors import PersistenceError
from app.core.invoice_record import (
    INVOICES_VIEW_PATH, insert_params, invoice_date, update_params,
)
from app.core.repository_protocols import QueryResultLike, Store, ViewInvalidator
from app.core.validate_invoice import Invalid, validate_invoice_fields
from app.infrastructure.observability import log_context

logger = logging.getLogger(__name__)

INSERT_INVOICE = text(
    "INSERT INTO invoices (customer_id, amount, status, date) "
    "VALUES (:customer_id, :amount, :status, :date)",
).bindparams(bindparam("date", type_=Date))

UPDATE_INVOICE = text(
    "UPDATE invoices SET customer_id = :customer_id, amount = :amount, status = :status "
    "WHERE id = :id",
)

DELETE_INVOICE = text("DELETE FROM invoices WHERE id = :id")

CREATE_FAILED_MESSAGE = "Missing Fields. Failed to Create Invoice."
UPDATE_FAILED_MESSAGE = "Missing Fields. Failed to Update Invoice."
DELETE_SUCCEEDED_MESSAGE = "Deleted Invoice"
DELETE_FAILED_MESSAGE = "Database Error: Failed to Delete Invoice."


@dataclass(frozen=True)
class Redirect:
    """Navigation signal — hand control to the routing layer."""
    location: str


@dataclass(frozen=True)
class FormState:
    """Validation failure rendered back into the form."""
    errors: dict[str, list[str]]
    message: str


@dataclass(frozen=True)
class DeleteSucceeded:
    message: str = DELETE_SUCCEEDED_MESSAGE


@dataclass(frozen=True)
class DeleteFailed:
    message: str
    cause: BaseException


WriteOutcome = Union[Redirect, FormState]
DeleteOutcome = Union[DeleteSucceeded, DeleteFailed]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InvoiceActions:
    """Form actions for invoices — one instance per request."""

    def __init__(
        self,
        store: Store,
        views: ViewInvalidator,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.views = views
        self.clock = clock

    async def create(self, raw_fields: Mapping[str, Any]) -> WriteOutcome:
        """Validate a new invoice form and insert it."""
        result = validate_invoice_fields(raw_fields)
        if isinstance(result, Invalid):
            return FormState(result.field_errors, CREATE_FAILED_MESSAGE)

        params = insert_params(result.draft, invoice_date(self.clock()))
        await self._write(WriteOperation.CREATE, INSERT_INVOICE, params)
        return self._invalidate_and_redirect()

    async def update(
        self, invoice_id: InvoiceId, raw_fields: Mapping[str, Any],
    ) -> WriteOutcome:
        """Validate an edited invoice form and overwrite customer, amount and status."""
        result = validate_invoice_fields(raw_fields)
        if isinstance(result, Invalid):
            return FormState(result.field_errors, UPDATE_FAILED_MESSAGE)

        params = update_params(invoice_id, result.draft)
        written = await self._write(
            WriteOperation.UPDATE, UPDATE_INVOICE, params, invoice_id,
        )
        if written.rowcount == 0:
            logger.warning(
                f"Update matched no invoice {invoice_id}",
                extra=log_context("update", invoice_id=invoice_id, rowcount=0),
            )
        return self._invalidate_and_redirect()

    async def delete(self, invoice_id: InvoiceId) -> DeleteOutcome:
        """Delete an invoice. Failures are returned, not raised."""
        try:
            await self._write(
                WriteOperation.DELETE, DELETE_INVOICE, {"id": invoice_id}, invoice_id,
            )
        except PersistenceError as e:
            return DeleteFailed(DELETE_FAILED_MESSAGE, e.cause or e)
        self.views.invalidate(INVOICES_VIEW_PATH)
        return DeleteSucceeded()

    async def _write(
        self,
        operation: WriteOperation,
        statement,
        params: dict[str, object],
        invoice_id: InvoiceId | None = None,
    ) -> QueryResultLike:
        try:
            async with self.store.connect(operation.value) as conn:
                return await conn.query(statement, params)
        except PersistenceError as e:
            e.context.invoice_id = invoice_id
            logger.error(
                f"Error during invoice {operation.value}: {e.message}",
                extra=log_context(
                    operation.value, invoice_id=invoice_id, error_code=e.code,
                ),
            )
            raise

    def _invalidate_and_redirect(self) -> Redirect:
        self.views.invalidate(INVOICES_VIEW_PATH)
        return Redirect(INVOICES_VIEW_PATH)

"""Invoice Routes — listing, form data, and form actions for invoices.

Invariants:
    - Form posts are handed to InvoiceActions untouched (raw string fields)
    - Redirect outcome -> 303 See Other; FormState -> 400 with field errors
    - Delete never raises for store failures: 500 with {message, cause}
    - The listing is served through the view cache keyed by query and page; a page
      rendered across an invalidation is returned but not cached

Design Decisions:
    - POST for edit/delete: HTML forms only submit GET and POST
    - cause is reported as the exception class name only (no SQL or driver text leaked)
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from app.api.dependencies import get_invoice_actions, get_invoice_queries
from app.core.domain_types import InvoiceId
from app.core.invoice_record import INVOICES_VIEW_PATH
from app.infrastructure.view_cache import ViewCache, get_view_cache, view_key
from app.services.invoice_actions import (
    DeleteFailed, FormState, InvoiceActions, WriteOutcome,
)
from app.services.invoice_queries import InvoiceQueries

logger = logging.getLogger(__name__)
router = APIRouter(prefix=INVOICES_VIEW_PATH, tags=["invoices"])


def _render_write_outcome(outcome: WriteOutcome):
    if isinstance(outcome, FormState):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": outcome.errors, "message": outcome.message},
        )
    return RedirectResponse(
        outcome.location, status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("")
async def list_invoices(
    query: str = Query(""),
    page: int = Query(1, ge=1),
    queries: InvoiceQueries = Depends(get_invoice_queries),
    views: ViewCache = Depends(get_view_cache),
):
    """Search invoices, one page at a time."""
    key = view_key(INVOICES_VIEW_PATH, query=query, page=page)
    cached = views.get(key)
    if cached is not None:
        return cached

    generation = views.generation
    payload = {
        "invoices": await queries.fetch_filtered_invoices(query, page),
        "total_pages": await queries.fetch_invoices_pages(query),
        "query": query,
        "page": page,
    }
    views.put(key, payload, generation)
    return payload


@router.get("/create")
async def create_invoice_form(
    queries: InvoiceQueries = Depends(get_invoice_queries),
):
    """Customers to choose from on the create form."""
    return {"customers": await queries.fetch_customers()}


@router.post("")
async def create_invoice(
    request: Request, actions: InvoiceActions = Depends(get_invoice_actions),
):
    form = await request.form()
    return _render_write_outcome(await actions.create(dict(form)))


@router.get("/{invoice_id}/edit")
async def edit_invoice_form(
    invoice_id: str, queries: InvoiceQueries = Depends(get_invoice_queries),
):
    """Current invoice values plus customers for the edit form."""
    invoice = await queries.fetch_invoice_by_id(InvoiceId(invoice_id))
    return {
        "invoice": invoice,
        "customers": await queries.fetch_customers(),
    }


@router.post("/{invoice_id}/edit")
async def update_invoice(
    invoice_id: str,
    request: Request,
    actions: InvoiceActions = Depends(get_invoice_actions),
):
    form = await request.form()
    outcome = await actions.update(InvoiceId(invoice_id), dict(form))
    return _render_write_outcome(outcome)


@router.post("/{invoice_id}/delete")
async def delete_invoice(
    invoice_id: str, actions: InvoiceActions = Depends(get_invoice_actions),
):
    outcome = await actions.delete(InvoiceId(invoice_id))
    if isinstance(outcome, DeleteFailed):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "message": outcome.message,
                "cause": type(outcome.cause).__name__,
            },
        )
    return {"message": outcome.message}

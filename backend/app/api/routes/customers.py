"""Customer Routes — customers table with invoice totals."""

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_invoice_queries
from app.services.invoice_queries import InvoiceQueries

router = APIRouter(prefix="/dashboard/customers", tags=["customers"])


@router.get("")
async def list_customers(
    query: str = Query(""),
    queries: InvoiceQueries = Depends(get_invoice_queries),
):
    """Customers matching `query` by name or email."""
    return {"customers": await queries.fetch_filtered_customers(query)}

"""Dashboard Overview — cards, revenue chart data, and latest invoices."""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_invoice_queries
from app.services.invoice_queries import InvoiceQueries

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
async def overview(queries: InvoiceQueries = Depends(get_invoice_queries)):
    return {
        "cards": await queries.fetch_card_data(),
        "revenue": await queries.fetch_revenue(),
        "latest_invoices": await queries.fetch_latest_invoices(),
    }

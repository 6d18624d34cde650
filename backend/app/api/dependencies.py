"""Route Dependencies — per-request construction of services from app-scoped resources.

Invariants:
    - Services are built per request; the pool and view cache are app-scoped (app.state)
    - Tests override get_pool / get_view_cache, never these factories
"""

from fastapi import Depends

from app.infrastructure.database import ConnectionPool, get_pool
from app.infrastructure.view_cache import ViewCache, get_view_cache
from app.services.authenticate import Authenticator
from app.services.invoice_actions import InvoiceActions
from app.services.invoice_queries import InvoiceQueries


def get_invoice_actions(
    pool: ConnectionPool = Depends(get_pool),
    views: ViewCache = Depends(get_view_cache),
) -> InvoiceActions:
    return InvoiceActions(pool, views)


def get_invoice_queries(
    pool: ConnectionPool = Depends(get_pool),
) -> InvoiceQueries:
    return InvoiceQueries(pool)


def get_authenticator(
    pool: ConnectionPool = Depends(get_pool),
) -> Authenticator:
    return Authenticator(pool)

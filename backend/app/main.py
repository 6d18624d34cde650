"""Invoice Dashboard API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DashboardError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Connection pool and view cache created on startup, stored on app.state,
      pool disposed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - app.state over module globals: routes receive the pool through Depends(get_pool),
      tests swap it with dependency_overrides
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import auth, customers, dashboard, health, invoices
from app.config import get_settings
from app.infrastructure.database import ConnectionPool
from app.infrastructure.observability import setup_logging
from app.infrastructure.view_cache import ViewCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.pool = ConnectionPool.from_url(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.view_cache = ViewCache()
    logger.info("Invoice Dashboard API started")
    yield
    logger.info("Invoice Dashboard API shutting down")
    await app.state.pool.dispose()


app = FastAPI(
    title="Invoice Dashboard API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(dashboard.router)
app.include_router(invoices.router)
app.include_router(customers.router)
app.include_router(auth.router)

register_error_handlers(app)

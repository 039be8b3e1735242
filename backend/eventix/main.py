"""Eventix API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map EventixError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Registry, ledger gateway, catalog and orchestrator are built in lifespan,
      in dependency order, and released in reverse on shutdown

Design Decisions:
    - Registry probe runs inside lifespan: a dead database degrades the registry
      to memory storage instead of failing startup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventix.api.error_handlers import register_error_handlers
from eventix.api.routes import health, tickets, users
from eventix.config import get_settings
from eventix.infrastructure.catalog import init_catalog
from eventix.infrastructure.ledger_gateway import close_ledger, init_ledger
from eventix.infrastructure.observability import setup_logging
from eventix.infrastructure.registry import close_registry, init_registry
from eventix.services.ticket_lifecycle import init_orchestrator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    registry = await init_registry(
        settings.database_url or None,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        probe_timeout_seconds=settings.registry_probe_timeout_seconds,
        operation_timeout_seconds=settings.registry_operation_timeout_seconds,
        create_schema=settings.registry_create_schema,
    )
    ledger = init_ledger(settings.ledger_base_url, settings.ledger_timeout_seconds)
    catalog = init_catalog(settings.catalog_path)
    init_orchestrator(registry, ledger, catalog)
    logger.info(
        "Eventix API started",
        extra={"backend": registry.backend.value},
    )
    yield
    logger.info("Eventix API shutting down")
    await close_ledger()
    await close_registry()


app = FastAPI(title="Eventix API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(tickets.router)
app.include_router(users.router)

register_error_handlers(app)

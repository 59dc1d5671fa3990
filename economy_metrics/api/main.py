"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from economy_metrics.api.middleware import RequestIDMiddleware, MetricsMiddleware
from economy_metrics.api.v1 import accounts, groups, transactions
from economy_metrics.config import settings
from economy_metrics.infrastructure.database.session import SessionLocal, init_db
from economy_metrics.infrastructure.database.store import DataStore
from economy_metrics.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema if configured and refuse to start without a reachable store"""
    if settings.create_schema_on_startup:
        init_db()

    with SessionLocal() as db:
        DataStore(db).ping()

    logging.info("Data store reachable", extra={"service": settings.service_name})
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Economy Metrics",
        description="Incremental group transfer, balance and recent-activity aggregates",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(groups.router, prefix="/v1", tags=["groups"])
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])

    return app


app = create_app()

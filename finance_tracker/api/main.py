"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finance_tracker.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_tracker.api.v1 import debts, members, summary, transactions
from finance_tracker.infrastructure.database.models import Base
from finance_tracker.infrastructure.database.repositories import CategoryRepository
from finance_tracker.infrastructure.database.session import SessionLocal, engine
from finance_tracker.infrastructure.observability.logging import setup_logging
from finance_tracker.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def init_db() -> None:
    """Create tables and seed default categories"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        CategoryRepository(db).seed_defaults()
        db.commit()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_schema:
        init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Finance Tracker",
        description="Family revenues, expenses, recurring records and installment debts",
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
    app.include_router(members.router, prefix="/v1", tags=["members"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(debts.router, prefix="/v1", tags=["debts"])
    app.include_router(summary.router, prefix="/v1", tags=["summary"])

    return app


app = create_app()

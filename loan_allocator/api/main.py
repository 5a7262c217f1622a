"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from loan_allocator.api.middleware import RequestIDMiddleware, MetricsMiddleware
from loan_allocator.api.v1 import allocations
from loan_allocator.infrastructure.database.models import Base
from loan_allocator.infrastructure.database.session import engine
from loan_allocator.infrastructure.observability.logging import setup_logging
from loan_allocator.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def init_db() -> None:
    """Create tables for stored runs"""
    Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        lifespan=lifespan,
        title="Loan Allocator",
        description="Covenant-aware assignment of loans to lending facilities",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
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
    app.include_router(allocations.router, prefix="/v1", tags=["allocations"])

    return app


app = create_app()

"""
FastAPI Application Entry Point.

This is the main application file for the RapidTransit parcel backend.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from rapidtransit.app.core.config import settings
from rapidtransit.app.api.v1.router import router as api_v1_router
from rapidtransit.app.db.session import engine, Base
from rapidtransit.app.core.observability import ObservabilityMiddleware, configure_logging
from rapidtransit.app.core.redis_client import ping_redis
from rapidtransit.app.services.sms_dispatcher import drain_sms_dispatcher
from rapidtransit.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from rapidtransit.app.models.user import User
from rapidtransit.app.models.audit_log import AuditLog
from rapidtransit.app.models.transport import Transport
from rapidtransit.app.models.parcel import Parcel
from rapidtransit.app.models.parcel_status_history import ParcelStatusHistory
from rapidtransit.app.models.notification import Notification
from rapidtransit.app.models.dlq import DeadLetterQueue

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Creates database tables on startup.
    2. Lets in-flight SMS sends finish on shutdown.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await drain_sms_dispatcher()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Parcel booking, tracking and recipient notification API",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
        "redis": "up" if await ping_redis() else "down",
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to RapidTransit Parcel API",
        "docs": "/docs",
        "health": "/health",
        "track": f"/{settings.api_version}/track/{{tracking_number}}",
    }

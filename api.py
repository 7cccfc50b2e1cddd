"""
PowerShield FastAPI Application

Main entry point for the PowerShield content API: users, gallery,
contact messages, careers and admin management.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Common library imports
from common.database import connect_with_fallback
from common.utils import configure_logging, register_exception_handlers, success_response

# App-specific imports
from powershield.config import get_settings
from powershield.database import ensure_indexes
from powershield.middleware import RequestLoggerMiddleware

# Import routers
from powershield.routers import (
    admin_router,
    users_router,
    gallery_router,
    contacts_router,
    careers_router,
    admin_careers_router,
    applications_router,
    admin_applications_router,
)

# Import service initialization
from powershield.dependencies import init_all_services

logger = logging.getLogger(__name__)

settings = get_settings()

API_VERSION = "1.0.0"


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Refuses to start without MONGODB_URI and JWT_SECRET, then connects,
    builds indexes and initializes services. The connection manager lives
    on app.state for the lifetime of the process.
    """
    # Startup
    configure_logging(settings.LOG_LEVEL)
    settings.validate_required()

    logger.info("Starting PowerShield API...")

    mongo = await connect_with_fallback(
        settings.get_mongodb_uris(),
        settings.MONGODB_DATABASE,
        attempts=settings.MONGODB_CONNECT_ATTEMPTS,
        backoff_seconds=settings.MONGODB_CONNECT_BACKOFF_SECONDS,
        timeout_ms=settings.MONGODB_TIMEOUT_MS,
    )
    app.state.mongo = mongo

    await ensure_indexes(mongo.db)

    init_all_services(db=mongo.db, settings=settings)
    logger.info("PowerShield API started successfully")

    yield

    # Shutdown
    logger.info("Shutting down PowerShield API...")
    await mongo.disconnect()
    logger.info("PowerShield API shut down complete.")


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="PowerShield API",
    description="Content, careers and admin management backend",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

# =============================================================================
# Middleware
# =============================================================================
app.add_middleware(RequestLoggerMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# =============================================================================
# Include Routers (all under /api prefix)
# =============================================================================
API_PREFIX = "/api"

# Mounted before admin_router so /admin/careers is not read as an admin id
app.include_router(admin_careers_router, prefix=API_PREFIX, tags=["Careers"])
app.include_router(admin_applications_router, prefix=API_PREFIX, tags=["Job Applications"])
app.include_router(admin_router, prefix=API_PREFIX, tags=["Admin"])
app.include_router(users_router, prefix=API_PREFIX, tags=["Users"])
app.include_router(gallery_router, prefix=API_PREFIX, tags=["Gallery"])
app.include_router(contacts_router, prefix=API_PREFIX, tags=["Contacts"])
app.include_router(careers_router, prefix=API_PREFIX, tags=["Careers"])
app.include_router(applications_router, prefix=API_PREFIX, tags=["Job Applications"])


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get(f"{API_PREFIX}/health", tags=["Health"])
async def health(request: Request):
    """
    Health check endpoint.

    Returns the status of the API and whether the database answers a ping.
    """
    mongo = getattr(request.app.state, "mongo", None)
    database_ok = await mongo.ping() if mongo is not None else False

    return success_response({
        "status": "ok",
        "version": API_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": database_ok,
        "environment": settings.ENVIRONMENT,
    })


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )

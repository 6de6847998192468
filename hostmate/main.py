"""
HostMate - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
import structlog

from hostmate.config import settings
from hostmate.database import SessionLocal
from hostmate.jobs.celery_app import celery_app
from hostmate.api import agent, auth, cleanup, emails, linking, reservations

logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting HostMate API", version="1.0.0")
    yield
    logger.info("Shutting down HostMate API")


# Create FastAPI application
app = FastAPI(
    title="HostMate",
    description="Restaurant reservations with a conversational booking agent",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": "1.0.0"}


async def _check_database() -> str:
    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
    except Exception as e:
        return f"failed: {e}"
    return "ok"


async def _check_workers() -> str:
    # control.ping blocks on the broker round trip
    try:
        replies = await run_in_threadpool(celery_app.control.ping, timeout=1)
    except Exception as e:
        return f"failed: {e}"
    return "ok" if replies else "failed: no workers replied"


@app.get("/health/ready")
async def ready():
    """Database and background worker reachability"""
    checks = {
        "database": await _check_database(),
        "workers": await _check_workers(),
    }
    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


# Include API routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(reservations.router, prefix="/reservations", tags=["Reservations"])
app.include_router(agent.router, prefix="/reservation-agent", tags=["Reservation Agent"])
app.include_router(linking.router, prefix="/guest-reservations", tags=["Guest Linking"])
app.include_router(cleanup.router, prefix="/cleanup-past-reservations", tags=["Cleanup"])
app.include_router(emails.router, tags=["Email"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hostmate.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )

"""
FastAPI application for the CSR donation platform
"""

import logging
from contextlib import asynccontextmanager

import redis
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from acme_csr.api.errors import register_exception_handlers
from acme_csr.api.middleware import TenantMiddleware
from acme_csr.api.router import api_router
from acme_csr.core.config import settings
from acme_csr.core.logging import configure_logging
from acme_csr.db.database import SessionLocal
from acme_csr.infrastructure.factories import install_cache_invalidation
from acme_csr.infrastructure.tenancy.resolver import TenantResolver

# Import all ORM models to ensure relationships are resolved
import acme_csr.infrastructure.orm  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    configure_logging()
    install_cache_invalidation()
    logger.info(f"Starting {settings.PROJECT_NAME}")
    yield
    logger.info(f"Shutting down {settings.PROJECT_NAME}")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Multi-tenant CSR campaigns and donations",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(TenantMiddleware, resolver=TenantResolver(SessionLocal))
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint that verifies database and redis connectivity"""
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1")).fetchone()
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "unhealthy"
    finally:
        db.close()

    try:
        redis.from_url(settings.REDIS_URL).ping()
        redis_status = "healthy"
    except redis.RedisError as e:
        logger.warning(f"Redis health check failed: {e}")
        redis_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "database": db_status,
        "redis": redis_status,
        "version": "1.0.0"
    }


if __name__ == "__main__":
    uvicorn.run(
        "acme_csr.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )

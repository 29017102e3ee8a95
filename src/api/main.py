"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures error handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.memory import InMemoryRegistryRepository
from src.adapters.repository.postgres import PostgresRegistryRepository, run_migrations
from src.api.dependencies import build_registry
from src.api.errors import install_error_handlers
from src.api.v1 import router as v1_router
from src.config.settings import Settings, get_settings
from src.domain.exceptions import NoPermission
from src.domain.service import TrustRegistry

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Trust Registry API v1 - Register domains, review, report and moderate",
    },
]


def bootstrap_admin(registry: TrustRegistry, identity: str | None) -> None:
    """Grant admin to the configured identity if the registry has no admin yet."""
    if not identity:
        return
    try:
        registry.bootstrap_admin(identity)
        logger.info("Bootstrapped admin identity %s", identity)
    except NoPermission:
        logger.info("Admin already present, skipping bootstrap")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the storage backend (in-memory or PostgreSQL pool + migrations)
    - Builds the registry service and bootstraps the first admin
    - Closes the connection pool on shutdown
    """
    settings: Settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    logger.info("Starting application...")

    pool = None
    if settings.storage_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
        repository = PostgresRegistryRepository(pool)
    else:
        logger.info("Using in-memory storage")
        repository = InMemoryRegistryRepository()

    registry = build_registry(
        repository,
        reputation_mode=settings.reputation_mode,
        strict_role_targets=settings.strict_role_targets,
    )
    bootstrap_admin(registry, settings.bootstrap_admin)

    # Store in app state for dependency injection
    app.state.pool = pool
    app.state.registry = registry

    logger.info(
        "Application startup complete (reputation mode: %s)", settings.reputation_mode.value
    )

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="nametrust",
    description="Trust Registry API - Ownership-proven names with reputation and moderation",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

install_error_handlers(app)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with storage validation.

    Returns 200 OK if application and storage are healthy.
    Raises exception if the database connection fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}

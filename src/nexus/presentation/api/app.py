"""FastAPI application factory.

Creates and configures the FastAPI application with routers, middleware
and exception handlers.

API Versioning:
    All API endpoints are versioned under /api/v1/ prefix.
    The health check endpoint remains unversioned at /health.

Run with:
    uvicorn nexus.presentation.api.app:create_app --factory
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError

from nexus.presentation.api.config import get_api_settings
from nexus.presentation.api.dependencies import (
    EphemeralStoreDep,
    build_engine,
    build_ephemeral_store,
    build_session_maker,
    create_tables,
)
from nexus.presentation.api.exception_handlers import setup_exception_handlers
from nexus.presentation.api.routers import auth_router
from nexus_config.settings import Settings
from nexus_identity.infrastructure.cache import RedisEphemeralStore

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
API_V1_PREFIX = "/api/v1"

OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """Accounts, verification and session management.

**Registration:**
- Sign-ups are staged until the emailed code is confirmed
- No tokens are issued before verification

**Sessions:**
- Short-lived access tokens, long-lived refresh tokens
- One active session per user; each refresh rotates the refresh token
- Password reset and password change end all sessions
""",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
]


def configure_logging(settings: Settings) -> None:
    """Configure application logging.

    - Console output with timestamps and module names
    - Configurable log level for nexus modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    logging.getLogger("nexus").setLevel(log_level)
    logging.getLogger("nexus_identity").setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("redis").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting Nexus API v%s...", API_VERSION)
    try:
        await create_tables(app.state.engine)
    except (ConnectionRefusedError, OperationalError):
        logger.critical("Could not connect to the database.")
        raise SystemExit(1) from None

    yield

    logger.info("Shutting down Nexus API...")
    await app.state.ephemeral_store.close()
    await app.state.engine.dispose()
    logger.info("Database and store connections closed")


def create_v1_router() -> APIRouter:
    v1_router = APIRouter()
    v1_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    return v1_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing. The database engine,
        the ephemeral store and every request dependency are built from
        this instance; defaults to settings loaded from the environment.

    Returns
    -------
    Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_api_settings()

    configure_logging(settings)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Identity and session service with staged, email-verified sign-up.",
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )
    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_maker = build_session_maker(app.state.engine)
    app.state.ephemeral_store = build_ephemeral_store(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(create_v1_router(), prefix=API_V1_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check(store: EphemeralStoreDep) -> dict:
        """Health check endpoint.

        Unversioned for load balancer/monitoring compatibility.
        """
        store_status = "ok"
        if isinstance(store, RedisEphemeralStore) and not await store.health_check():
            store_status = "unavailable"

        return {
            "status": "healthy" if store_status == "ok" else "degraded",
            "version": API_VERSION,
            "ephemeral_store": store_status,
        }

    return app

"""FastAPI dependency injection for the Nexus API.

Provides dependencies for:
- Database sessions
- The ephemeral store (one-time codes, pending registrations, sessions)
- Service instances
- Authentication (caller identity from the access token)
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from nexus_config.settings import Settings
from nexus_identity.application.context import UserContext
from nexus_identity.application.services import (
    AuthenticationService,
    RegistrationService,
)
from nexus_identity.exceptions import InvalidTokenError
from nexus_identity.infrastructure.cache import (
    MemoryEphemeralStore,
    RedisEphemeralStore,
)
from nexus_identity.infrastructure.email import EmailService
from nexus_identity.infrastructure.persistence.sqlalchemy import (
    IdentityBase,
    UserRepositorySQLAlchemy,
)
from nexus_identity.repositories import EphemeralSessionStore, EphemeralStore
from nexus_identity.services import JWTService, OTPService, PasswordHashingService

logger = logging.getLogger(__name__)

# Security scheme for JWT Bearer tokens
security = HTTPBearer(auto_error=False)


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_app_settings)]


# -----------------------------------------------------------------------------
# Database Engine & Session (one per application)
# -----------------------------------------------------------------------------


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async database engine for an application.

    The engine manages the connection pool and is reused across all requests.
    No connection is opened until the first query.

    Returns
    -------
    AsyncEngine instance
    """
    return create_async_engine(
        settings.database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Routers commit after a successful operation; a session that is closed
    without a commit rolls back.

    Yields
    ------
    AsyncSession for database operations
    """
    async with request.app.state.session_maker() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all database tables (idempotent).

    Uses SQLAlchemy's create_all() which only creates missing tables.
    """
    logger.info("Ensuring all database tables exist...")

    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)

    logger.info("Database schema is up to date")


# -----------------------------------------------------------------------------
# Ephemeral Store (one per application)
# -----------------------------------------------------------------------------


def build_ephemeral_store(settings: Settings) -> EphemeralStore:
    """
    Create the ephemeral store selected by ``ephemeral_store_backend``.

    Redis in deployments; the in-memory store only holds state for a
    single process and is meant for development.
    """
    if settings.ephemeral_store_backend == "memory":
        logger.warning("Using in-memory ephemeral store (single process only)")
        return MemoryEphemeralStore()

    return RedisEphemeralStore.from_url(
        settings.redis_url,
        key_prefix=settings.redis_key_prefix,
    )


def get_ephemeral_store(request: Request) -> EphemeralStore:
    return request.app.state.ephemeral_store


EphemeralStoreDep = Annotated[EphemeralStore, Depends(get_ephemeral_store)]


# -----------------------------------------------------------------------------
# Authentication Services
# -----------------------------------------------------------------------------


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Get JWT service configured with API settings."""
    return JWTService(
        access_secret_key=settings.jwt_access_secret_key.get_secret_value(),
        refresh_secret_key=settings.jwt_refresh_secret_key.get_secret_value(),
        access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
        refresh_token_expire_days=settings.jwt_refresh_token_expire_days,
    )


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    return PasswordHashingService(rounds=settings.password_hash_rounds)


def get_email_service(settings: SettingsDep) -> EmailService:
    return EmailService(settings)


async def get_authentication_service(  # noqa: PLR0913
    session: DBSession,
    store: EphemeralStoreDep,
    settings: SettingsDep,
    jwt_service: JWTService = Depends(get_jwt_service),
    password_service: PasswordHashingService = Depends(get_password_service),
    email_service: EmailService = Depends(get_email_service),
) -> AuthenticationService:
    """
    Get authentication service with all dependencies.

    This service orchestrates registration, verification, login and
    session management.
    """
    user_repo = UserRepositorySQLAlchemy(session)
    otp_service = OTPService(
        store,
        length=settings.otp_length,
        expiry_minutes=settings.otp_expiry_minutes,
    )
    registration_service = RegistrationService(
        store=store,
        user_repository=user_repo,
        password_service=password_service,
        otp_service=otp_service,
        email_service=email_service,
        ttl_seconds=settings.pending_registration_ttl_seconds,
    )

    return AuthenticationService(
        user_repository=user_repo,
        registration_service=registration_service,
        otp_service=otp_service,
        password_service=password_service,
        jwt_service=jwt_service,
        session_store=EphemeralSessionStore(store),
        email_service=email_service,
    )


# Type alias for injected auth service
AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]


# -----------------------------------------------------------------------------
# Current User (JWT Authentication)
# -----------------------------------------------------------------------------


async def get_current_user(
    auth_service: AuthService,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> UserContext:
    """
    FastAPI dependency to get the caller's identity from the access token.

    Verification is stateless: the user store is not consulted. Refresh
    tokens are rejected because they are signed with a different secret
    and carry a different purpose.

    Raises
    ------
    HTTPException
        401 if token is missing, invalid or not an access token
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = auth_service.authenticate_access_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.warning("Invalid token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    return UserContext.from_token(payload)


# Type alias for injected current user
CurrentUser = Annotated[UserContext, Depends(get_current_user)]

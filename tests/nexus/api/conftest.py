"""
Fixtures for HTTP API tests.

The app is built with ``create_app`` and driven through httpx's ASGI
transport. The ephemeral store is the in-memory one the app builds from
its settings. Lifespan does not run, so the database session is
overridden with an in-memory SQLite database; email goes to a recording
service.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from nexus.presentation.api.app import create_app
from nexus.presentation.api.dependencies import (
    get_db_session,
    get_email_service,
)
from nexus_identity.infrastructure.cache import MemoryEphemeralStore
from nexus_identity.infrastructure.persistence.sqlalchemy import IdentityBase
from tests.shared.fixtures import RecordingEmailService, make_settings
from tests.shared.fixtures.database import create_sqlite_engine

AUTH = "/api/v1/auth"
EMAIL = "a@x.com"
PASSWORD = "Pw12345"  # NOQA: S105


@pytest_asyncio.fixture
async def engine():
    engine = create_sqlite_engine()
    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def ephemeral_store(app) -> MemoryEphemeralStore:
    return app.state.ephemeral_store


@pytest.fixture
def email_service() -> RecordingEmailService:
    return RecordingEmailService()


@pytest.fixture
def app(engine, email_service):
    app = create_app(make_settings())
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_db_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_email_service] = lambda: email_service
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def verified(client, email_service) -> dict:
    """Register and verify ``a@x.com``; returns the verify-email response body."""
    response = await client.post(
        f"{AUTH}/register",
        json={"email": EMAIL, "password": PASSWORD, "name": "A"},
    )
    assert response.status_code == 201

    response = await client.post(
        f"{AUTH}/verify-email",
        json={"email": EMAIL, "otp": email_service.last_code(EMAIL)},
    )
    assert response.status_code == 200
    return response.json()

"""
Fixtures for repository and store integration tests.

Each backend-agnostic test runs against a local backend (SQLite, the
memory store) and, when integration tests are enabled, against
Testcontainers Postgres and Redis.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from nexus_identity.infrastructure.cache import MemoryEphemeralStore
from nexus_identity.infrastructure.persistence.sqlalchemy import IdentityBase
from tests.shared.fixtures.database import (  # noqa: F401
    async_engine,
    create_sqlite_engine,
    db_session,
    postgres_container,
    redis_container,
    redis_store,
)


@pytest_asyncio.fixture
async def sqlite_session():
    engine = create_sqlite_engine()
    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture(
    params=[
        "sqlite",
        pytest.param("postgres", marks=pytest.mark.integration),
    ],
)
def repo_session(request):
    """An AsyncSession on a fresh schema, per database backend."""
    if request.param == "postgres":
        return request.getfixturevalue("db_session")
    return request.getfixturevalue("sqlite_session")


@pytest.fixture(
    params=[
        "memory",
        pytest.param("redis", marks=pytest.mark.integration),
    ],
)
def ephemeral_store(request):
    """An empty EphemeralStore, per backend."""
    if request.param == "redis":
        return request.getfixturevalue("redis_store")
    return MemoryEphemeralStore()

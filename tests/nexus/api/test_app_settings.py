"""Tests that ``create_app`` builds its resources from the settings it is given."""

import pytest
from httpx import ASGITransport, AsyncClient

from nexus.presentation.api.app import create_app
from nexus.presentation.api.dependencies import SettingsDep
from nexus_identity.infrastructure.cache import (
    MemoryEphemeralStore,
    RedisEphemeralStore,
)
from tests.shared.fixtures import make_settings


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestCreateAppSettings:
    """Settings passed to create_app win over the environment."""

    @pytest.fixture(autouse=True)
    def redis_in_environment(self, monkeypatch):
        monkeypatch.setenv("EPHEMERAL_STORE_BACKEND", "redis")
        monkeypatch.setenv("POSTGRES_HOST", "env-db")

    def test_store_follows_passed_settings(self):
        app = create_app(make_settings(ephemeral_store_backend="memory"))

        assert isinstance(app.state.ephemeral_store, MemoryEphemeralStore)

    def test_redis_store_built_from_passed_url(self):
        app = create_app(
            make_settings(
                ephemeral_store_backend="redis",
                redis_url="redis://cache:6380/2",
            ),
        )

        assert isinstance(app.state.ephemeral_store, RedisEphemeralStore)

    def test_engine_follows_passed_settings(self):
        app = create_app(make_settings(postgres_host="custom-db", postgres_port=5433))

        assert app.state.engine.url.host == "custom-db"
        assert app.state.engine.url.port == 5433
        assert app.state.session_maker.kw["bind"] is app.state.engine

    def test_each_app_gets_its_own_store(self):
        first = create_app(make_settings())
        second = create_app(make_settings())

        assert first.state.ephemeral_store is not second.state.ephemeral_store

    def test_without_settings_reads_environment(self, monkeypatch):
        monkeypatch.setenv("JWT_ACCESS_SECRET_KEY", "env-access-secret")
        monkeypatch.setenv("JWT_REFRESH_SECRET_KEY", "env-refresh-secret")
        monkeypatch.setenv("POSTGRES_PASSWORD", "env-password")
        monkeypatch.setenv("EPHEMERAL_STORE_BACKEND", "memory")

        app = create_app()

        assert isinstance(app.state.ephemeral_store, MemoryEphemeralStore)
        assert app.state.engine.url.host == "env-db"


class TestCreateAppRequests:
    """Requests are served by the app's own resources, with no overrides."""

    @pytest.fixture(autouse=True)
    def redis_in_environment(self, monkeypatch):
        monkeypatch.setenv("EPHEMERAL_STORE_BACKEND", "redis")

    @pytest.mark.asyncio
    async def test_health_uses_app_store(self):
        app = create_app(make_settings(ephemeral_store_backend="memory"))

        async with _client(app) as client:
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["ephemeral_store"] == "ok"
        assert app.dependency_overrides == {}

    @pytest.mark.asyncio
    async def test_request_dependencies_receive_passed_settings(self):
        app = create_app(make_settings(app_name="Custom"))

        @app.get("/settings-name")
        async def settings_name(settings: SettingsDep) -> dict:
            return {"app_name": settings.app_name}

        async with _client(app) as client:
            response = await client.get("/settings-name")

        assert response.json() == {"app_name": "Custom"}

    @pytest.mark.asyncio
    async def test_missing_refresh_token_without_overrides(self):
        """The auth service is assembled from app state; no query runs."""
        app = create_app(make_settings(postgres_host="custom-db"))

        async with _client(app) as client:
            response = await client.post("/api/v1/auth/refresh")

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_TOKEN"

"""Root pytest configuration for test discovery and auto-skip behavior.

All tests stay visible in the IDE test explorer while tests that need
real backing services are auto-skipped unless explicitly enabled.

Test Structure:
    tests/
    ├── nexus/                 # HTTP API (FastAPI app, SQLite, memory store) and error mapping
    ├── nexus_config/          # Settings loading and validation
    ├── nexus_identity/        # Identity domain, services and stores
    │   ├── unit/              # Fast, isolated tests
    │   └── integration/       # Tests with Testcontainers PostgreSQL/Redis
    └── shared/                # Shared fixtures, fakes and factories

Environment Variables:
    RUN_INTEGRATION=1    Run @pytest.mark.integration tests
    RUN_ALL_TESTS=1      Run all tests (overrides other settings)

Pytest Options:
    --run-integration    Run integration tests
    --run-all            Run all tests
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from nexus_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.test for tests when present
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.test").exists():
    load_dotenv(CONFIG_DIR / ".env.test")


def _enabled(value: str | None) -> bool:
    return (value or "").lower() in ("1", "true", "yes")


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.integration",
    )
    parser.addoption(
        "--run-all",
        action="store_true",
        default=False,
        help="Run all tests regardless of markers",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that need Docker-backed Postgres/Redis (auto-skipped)",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take more than 1 second",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip integration tests unless explicitly enabled."""
    if config.getoption("--run-all") or _enabled(os.environ.get("RUN_ALL_TESTS")):
        return

    run_integration = config.getoption("--run-integration") or _enabled(
        os.environ.get("RUN_INTEGRATION"),
    )
    if run_integration:
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test - run with --run-integration or RUN_INTEGRATION=1",
    )
    for item in items:
        # Explicit marker only, not folder name
        if "integration" in {mark.name for mark in item.iter_markers()}:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def fresh_settings_cache():
    """Never let one test's cached Settings leak into another."""
    clear_settings_cache()
    yield
    clear_settings_cache()

"""Shared pytest fixtures for all test domains."""

from tests.shared.fixtures.factories import TestUserFactory, make_settings
from tests.shared.fixtures.fakes import (
    FakeClock,
    InMemoryUserRepository,
    RecordingEmailService,
    wrong_code,
)

__all__ = [
    "FakeClock",
    "InMemoryUserRepository",
    "RecordingEmailService",
    "TestUserFactory",
    "make_settings",
    "wrong_code",
]

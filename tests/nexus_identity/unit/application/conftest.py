"""
Fixtures for the identity application services.

Services are wired against real in-process collaborators: the memory
ephemeral store (on a hand-driven clock), an in-memory user repository
and an email service that records every code instead of sending it.
"""

import pytest

from nexus_identity.application.services import (
    AuthenticationService,
    RegistrationService,
)
from nexus_identity.infrastructure.cache import MemoryEphemeralStore
from nexus_identity.repositories import EphemeralSessionStore
from nexus_identity.services import JWTService, OTPService, PasswordHashingService
from tests.shared.fixtures import (
    FakeClock,
    InMemoryUserRepository,
    RecordingEmailService,
)
from tests.shared.fixtures.factories import (
    TEST_ACCESS_SECRET,
    TEST_HASH_ROUNDS,
    TEST_REFRESH_SECRET,
)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> MemoryEphemeralStore:
    return MemoryEphemeralStore(clock=clock)


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def email_service() -> RecordingEmailService:
    return RecordingEmailService()


@pytest.fixture
def password_service() -> PasswordHashingService:
    return PasswordHashingService(rounds=TEST_HASH_ROUNDS)


@pytest.fixture
def jwt_service() -> JWTService:
    return JWTService(TEST_ACCESS_SECRET, TEST_REFRESH_SECRET)


@pytest.fixture
def otp_service(store) -> OTPService:
    return OTPService(store)


@pytest.fixture
def session_store(store) -> EphemeralSessionStore:
    return EphemeralSessionStore(store)


@pytest.fixture
def registration_service(
    store,
    user_repo,
    password_service,
    otp_service,
    email_service,
) -> RegistrationService:
    return RegistrationService(
        store=store,
        user_repository=user_repo,
        password_service=password_service,
        otp_service=otp_service,
        email_service=email_service,
    )


@pytest.fixture
def auth_service(  # noqa: PLR0913
    user_repo,
    registration_service,
    otp_service,
    password_service,
    jwt_service,
    session_store,
    email_service,
) -> AuthenticationService:
    return AuthenticationService(
        user_repository=user_repo,
        registration_service=registration_service,
        otp_service=otp_service,
        password_service=password_service,
        jwt_service=jwt_service,
        session_store=session_store,
        email_service=email_service,
    )

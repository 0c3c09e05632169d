"""Unit tests for mapping domain errors to HTTP status codes.

Every ``ErrorKind`` maps to exactly one status, so routers never pick
status codes for failures themselves.
"""

import pytest

from nexus.domain.shared.exceptions import DomainException, ErrorKind
from nexus.presentation.api.exception_handlers import (
    ERROR_KIND_TO_STATUS,
    get_status_for_exception,
)
from nexus_identity.domain.user import EmailAlreadyExistsError, UserNotFoundError
from nexus_identity.exceptions import (
    EmailDeliveryError,
    EphemeralStoreError,
    InvalidCredentialsError,
    InvalidOTPError,
    RegistrationPendingError,
    WeakPasswordError,
)


class TestErrorKindMapping:
    def test_every_kind_has_a_status(self):
        assert set(ERROR_KIND_TO_STATUS) == set(ErrorKind)

    @pytest.mark.parametrize(
        ("exc", "status_code"),
        [
            (EmailAlreadyExistsError("a@x.com"), 409),
            (RegistrationPendingError("a@x.com"), 409),
            (InvalidCredentialsError(), 401),
            (InvalidOTPError(), 401),
            (UserNotFoundError("id"), 404),
            (WeakPasswordError(), 400),
            (EmailDeliveryError("a@x.com"), 500),
            (EphemeralStoreError("down", operation="get"), 500),
        ],
    )
    def test_status_follows_kind(self, exc, status_code):
        assert get_status_for_exception(exc) == status_code

    def test_base_exception_is_internal(self):
        exc = DomainException("boom")

        assert exc.kind is ErrorKind.INTERNAL
        assert get_status_for_exception(exc) == 500
        assert "INTERNAL_ERROR" in repr(exc)

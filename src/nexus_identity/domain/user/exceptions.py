"""User domain exceptions.

Custom exceptions for the user domain, used for validation
and business rule violations.
"""

from nexus.domain.shared.exceptions import (
    ConflictError,
    ErrorCode,
    NotFoundError,
    ValidationError,
)


class InvalidEmailError(ValidationError):
    """Raised when email format is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorCode.INVALID_EMAIL)


class EmailAlreadyExistsError(ConflictError):
    """Email already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            "Email address is already registered",
            ErrorCode.EMAIL_EXISTS,
            {"email": email},
        )


class UserNotFoundError(NotFoundError):
    """User not found."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__("User not found", ErrorCode.USER_NOT_FOUND, {"user_id": user_id})
